import os
from dotenv import load_dotenv

load_dotenv()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


class Settings:
    PROJECT_NAME: str = "Loan Approval Scoring"
    PREDICTION_API_URL: str = os.getenv("PREDICTION_API_URL", "https://loan-approval-api.onrender.com/predict")
    PREDICTION_TIMEOUT_SECONDS: float = _float_env("PREDICTION_TIMEOUT_SECONDS", 12.0)
    # Output range every standardized feature is scaled into
    STANDARDIZATION_TARGET_MIN: float = _float_env("STANDARDIZATION_TARGET_MIN", 0.0)
    STANDARDIZATION_TARGET_MAX: float = _float_env("STANDARDIZATION_TARGET_MAX", 1.0)
    CLIENT_URL: str = os.getenv("CLIENT_URL", "http://localhost:3000")

settings = Settings()
