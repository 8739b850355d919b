import logging
import math
from typing import Dict, Optional, Tuple

from loan_scoring.core.config import settings
from loan_scoring.core.exceptions import ConfigurationError, RangeError, ValidationError
from loan_scoring.core.ranges import RangeRegistry, default_range_registry
from loan_scoring.schemas.loan_schema import FeatureVector, LoanContext, ValidatedApplication

logger = logging.getLogger(__name__)

DEFAULT_TARGET_RANGE = (settings.STANDARDIZATION_TARGET_MIN, settings.STANDARDIZATION_TARGET_MAX)


def standardize(
    value: float,
    min_value: float,
    max_value: float,
    target: Tuple[float, float] = (0.0, 1.0),
    clamp: bool = False,
    precision: Optional[int] = None,
    field: Optional[str] = None,
) -> float:
    """
    Linearly maps value from [min_value, max_value] onto target.

    The strict path (clamp=False) raises RangeError for values outside the
    bounds. With clamp=True the value is pulled to the nearest bound first.
    """
    if not min_value < max_value:
        raise ConfigurationError(field or "value", f"Invalid bounds [{min_value}, {max_value}]")
    low, high = target
    if not low < high:
        raise ConfigurationError(field or "value", f"Invalid target range [{low}, {high}]")
    if not math.isfinite(value):
        raise RangeError(field, value, min_value, max_value)

    if value < min_value or value > max_value:
        if not clamp:
            raise RangeError(field, value, min_value, max_value)
        value = max(min_value, min(max_value, value))

    # Bounds map exactly onto the ends of the target range
    if value == min_value:
        scaled = low
    elif value == max_value:
        scaled = high
    else:
        scaled = low + (value - min_value) / (max_value - min_value) * (high - low)

    if precision is not None:
        scaled = round(scaled, precision)
    return scaled


class Standardizer:
    """Builds the prediction request body from a validated application and its loan terms."""

    def __init__(
        self,
        registry: Optional[RangeRegistry] = None,
        target: Optional[Tuple[float, float]] = None,
        precision: Optional[int] = None,
    ):
        self.registry = registry or default_range_registry
        self.target = tuple(target) if target is not None else DEFAULT_TARGET_RANGE
        if not self.target[0] < self.target[1]:
            raise ConfigurationError("target", f"Invalid target range {self.target}")
        self.precision = precision

    # Scales one registry field; yes/no flags are sent as 0/1 without scaling
    def standardize_field(
        self,
        field: str,
        value: float,
        clamp: bool = False,
        registry: Optional[RangeRegistry] = None,
    ) -> float:
        field_range = (registry or self.registry).get_range(field)
        if field_range.is_binary:
            if value not in (0, 1):
                raise RangeError(field, value, field_range.min, field_range.max)
            return float(value)

        if clamp and not field_range.contains(value):
            logger.warning(
                f"Clamping {field}={value} into [{field_range.min}, {field_range.max}] before scaling"
            )
        return standardize(
            value,
            field_range.min,
            field_range.max,
            target=self.target,
            clamp=clamp,
            precision=self.precision,
            field=field,
        )

    def build(
        self,
        application: ValidatedApplication,
        loan_context: LoanContext,
        registry: Optional[RangeRegistry] = None,
    ) -> FeatureVector:
        registry = registry or self.registry
        if application.loan_type != loan_context.loan_type:
            raise ValidationError(
                "loan_type",
                "loan_type_mismatch",
                f"Application is for a {application.loan_type.value} loan but the loan terms are for "
                f"a {loan_context.loan_type.value} loan",
            )

        common = application.common
        payload: Dict[str, object] = {
            "loan_type": loan_context.loan_type,
            # Loan terms come from the calculator, not the form, so they are clamped rather than rejected
            "loan_amount": self.standardize_field("loan_amount", loan_context.amount, clamp=True, registry=registry),
            "term": self.standardize_field("term", loan_context.term_months, clamp=True, registry=registry),
            "int_rate": self.standardize_field("interest_rate", loan_context.interest_rate, clamp=True, registry=registry),
            "annual_income": self.standardize_field("annual_income", common.annual_income, registry=registry),
            "debt_to_income": self.standardize_field("debt_to_income", common.debt_to_income, registry=registry),
            "credit_score": self.standardize_field("credit_score", common.credit_score, registry=registry),
            "person_age": self.standardize_field("person_age", common.person_age, registry=registry),
            "income_to_loan": common.annual_income / loan_context.amount,
        }

        for field, value in application.details.model_dump(exclude={"loan_type"}).items():
            payload[field] = self.standardize_field(field, value, registry=registry)

        vector = FeatureVector(**payload)
        logger.debug(f"Built {loan_context.loan_type.value} feature vector: {vector.to_payload()}")
        return vector


standardizer = Standardizer()
