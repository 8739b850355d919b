"""
Error types raised by the loan scoring pipeline.

Validation and standardization problems are converted into result values
by the submission service before they reach a caller. Only
PredictionServiceError is expected to escape an awaited call.
"""

from typing import Optional


class LoanScoringError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(LoanScoringError):
    """User input failed a presence, format or range check."""

    def __init__(
        self,
        field: str,
        reason: str,
        message: str,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
    ):
        super().__init__(message)
        self.field = field
        self.reason = reason
        self.message = message
        self.min = min_value
        self.max = max_value


class ConfigurationError(LoanScoringError):
    """A caller asked for a field the range registry does not know."""

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"No range configured for field '{field}'")
        self.field = field


class RangeError(LoanScoringError):
    """A value reached the strict standardization path outside its bounds."""

    def __init__(self, field: Optional[str], value: float, min_value: float, max_value: float):
        label = field or "value"
        super().__init__(f"{label} {value} must be between {min_value} and {max_value}")
        self.field = field
        self.value = value
        self.min = min_value
        self.max = max_value


class PredictionServiceError(LoanScoringError):
    """The external prediction service could not produce a decision."""

    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    MALFORMED_RESPONSE = "malformed_response"

    def __init__(self, reason: str, detail: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(f"Prediction service error ({reason}): {detail}" if detail else f"Prediction service error ({reason})")
        self.reason = reason
        self.detail = detail
        self.status_code = status_code
