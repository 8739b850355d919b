from loan_scoring.core.config import Settings, settings

__all__ = ["Settings", "settings"]
