import logging
import math
import re
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from loan_scoring.core.exceptions import ValidationError
from loan_scoring.core.ranges import FieldRange, RangeRegistry, default_range_registry
from loan_scoring.schemas.loan_schema import (
    AgriculturalFields,
    BusinessFields,
    CommonFields,
    LoanTypeEnum,
    StudentFields,
    ValidatedApplication,
    ValidationResult,
)

logger = logging.getLogger(__name__)

REQUIRED = "required"
OUT_OF_RANGE = "out_of_range"
INVALID_LOAN_TYPE = "invalid_loan_type"

# Plain decimal text as typed into a form, without digit separators
NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

COMMON_FIELDS = ("annual_income", "debt_to_income", "credit_score", "person_age")

# Form and wire names accepted for each canonical field
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "education_level": ("education_level", "Education"),
    "mortgage": ("mortgage", "Mortgage"),
    "home_ownership": ("home_ownership", "person_home_ownership"),
    "credit_card_activity": ("credit_card_activity", "CreditCard"),
}

REQUIRED_MESSAGES: Dict[str, str] = {
    "annual_income": "Please enter your annual income",
    "debt_to_income": "Please enter your debt to income ratio",
    "credit_score": "Please enter your credit score",
    "person_age": "Please enter your age",
    "education_level": "Please enter your education level",
    "credit_risk": "Please enter credit risk score",
    "mortgage": "Please enter mortgage details",
    "home_ownership": "Please select home ownership status",
    "credit_card_usage": "Please enter credit card usage percentage",
    "credit_card_activity": "Please enter credit card activity level",
}

# Experience wording depends on what the applicant is borrowing for
EMP_LENGTH_MESSAGES: Dict[LoanTypeEnum, str] = {
    LoanTypeEnum.agricultural: "Please enter your agricultural experience",
    LoanTypeEnum.business: "Please enter your business experience",
}


def _format_bound(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class ApplicationValidator:
    """
    Checks raw loan form input before any numeric transformation.

    validate() never raises for bad user input: the first failing field is
    reported in a ValidationResult and nothing else is inspected.
    """

    def __init__(self, registry: Optional[RangeRegistry] = None):
        self.registry = registry or default_range_registry
        self._specific_validators: Dict[LoanTypeEnum, Callable[[Mapping[str, Any]], Any]] = {
            LoanTypeEnum.student: self._validate_student_fields,
            LoanTypeEnum.agricultural: self._validate_agricultural_fields,
            LoanTypeEnum.business: self._validate_business_fields,
        }

    def validate(self, raw: Mapping[str, Any], loan_type: Any) -> ValidationResult:
        try:
            try:
                normalized_type = LoanTypeEnum.normalize(loan_type)
            except ValueError:
                raise ValidationError("loan_type", INVALID_LOAN_TYPE, f"Invalid loan type: {loan_type}")

            common = self._validate_common_fields(raw)
            details = self._specific_validators[normalized_type](raw)
        except ValidationError as e:
            logger.info(f"Loan application rejected on '{e.field}' ({e.reason})")
            return ValidationResult(
                is_valid=False,
                error=e.message,
                field=e.field,
                reason=e.reason,
                min=e.min,
                max=e.max,
            )

        return ValidationResult(
            is_valid=True,
            application=ValidatedApplication(common=common, details=details),
        )

    def _validate_common_fields(self, raw: Mapping[str, Any]) -> CommonFields:
        values = {field: self._require_in_range(raw, field) for field in COMMON_FIELDS}
        return CommonFields(**values)

    def _validate_student_fields(self, raw: Mapping[str, Any]) -> StudentFields:
        return StudentFields(
            education_level=int(self._require_in_range(raw, "education_level")),
            credit_risk=self._require_in_range(raw, "credit_risk"),
        )

    def _validate_agricultural_fields(self, raw: Mapping[str, Any]) -> AgriculturalFields:
        return AgriculturalFields(
            mortgage=self._require_in_range(raw, "mortgage"),
            home_ownership=int(self._require_in_range(raw, "home_ownership")),
            emp_length=self._require_in_range(
                raw, "emp_length", EMP_LENGTH_MESSAGES[LoanTypeEnum.agricultural]
            ),
        )

    def _validate_business_fields(self, raw: Mapping[str, Any]) -> BusinessFields:
        return BusinessFields(
            emp_length=self._require_in_range(
                raw, "emp_length", EMP_LENGTH_MESSAGES[LoanTypeEnum.business]
            ),
            credit_card_usage=self._require_in_range(raw, "credit_card_usage"),
            credit_card_activity=int(self._require_in_range(raw, "credit_card_activity")),
        )

    # Presence check followed by parse and range check for one field
    def _require_in_range(self, raw: Mapping[str, Any], field: str, required_message: Optional[str] = None) -> float:
        text = self._read(raw, field)
        if text is None:
            raise ValidationError(field, REQUIRED, required_message or REQUIRED_MESSAGES[field])
        return self._parse_in_range(text, self.registry.get_range(field))

    @staticmethod
    def _read(raw: Mapping[str, Any], field: str) -> Optional[str]:
        for key in FIELD_ALIASES.get(field, (field,)):
            value = raw.get(key)
            if value is None:
                continue
            text = str(value).strip()
            if text:
                return text
        return None

    @staticmethod
    def _parse_in_range(text: str, field_range: FieldRange) -> float:
        value = float(text) if NUMBER_PATTERN.match(text) else math.nan

        valid = math.isfinite(value) and field_range.contains(value)
        if valid and field_range.integral:
            valid = value.is_integer()

        if not valid:
            raise ValidationError(
                field_range.name,
                OUT_OF_RANGE,
                ApplicationValidator._range_message(field_range),
                field_range.min,
                field_range.max,
            )
        return value

    @staticmethod
    def _range_message(field_range: FieldRange) -> str:
        label = field_range.display_label
        low, high = _format_bound(field_range.min), _format_bound(field_range.max)
        if field_range.is_binary:
            return f"{label} must be {low} or {high}"
        if field_range.integral:
            return f"{label} must be a whole number between {low} and {high}"
        return f"{label} must be between {low} and {high}"


application_validator = ApplicationValidator()
