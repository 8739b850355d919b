"""
Canonical value ranges for every field that can appear in a feature vector.

A RangeRegistry is an immutable value: build it once at startup and hand the
same instance to the validator and the standardizer. Provider-specific
registries are derived copies, never in-place edits.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

from loan_scoring.core.exceptions import ConfigurationError
from loan_scoring.loan_provider import LOAN_PROVIDERS_CATALOG
from loan_scoring.schemas.loan_schema import LoanProvider

logger = logging.getLogger(__name__)


class FieldRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    min: float
    max: float
    label: str = ""
    integral: bool = False

    @model_validator(mode="after")
    def _check_bounds(self):
        if not self.min < self.max:
            raise ConfigurationError(
                self.name,
                f"Range for '{self.name}' must satisfy min < max, got [{self.min}, {self.max}]",
            )
        return self

    @property
    def display_label(self) -> str:
        return self.label or self.name.replace("_", " ").capitalize()

    @property
    def is_binary(self) -> bool:
        return self.integral and self.min == 0 and self.max == 1

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


# Applicant attributes. Home ownership and credit card activity are yes/no flags.
APPLICANT_RANGES = (
    FieldRange(name="annual_income", min=0, max=100_000_000, label="Annual income"),
    FieldRange(name="credit_score", min=300, max=850, label="Credit score"),
    FieldRange(name="person_age", min=18, max=80, label="Age"),
    FieldRange(name="debt_to_income", min=0, max=100, label="Debt to income ratio"),
    FieldRange(name="education_level", min=1, max=5, label="Education level", integral=True),
    FieldRange(name="credit_risk", min=0, max=100, label="Credit risk score"),
    FieldRange(name="mortgage", min=0, max=100_000_000, label="Mortgage amount"),
    FieldRange(name="emp_length", min=0, max=50, label="Experience (years)"),
    FieldRange(name="credit_card_usage", min=0, max=100, label="Credit card usage percentage"),
    FieldRange(name="credit_card_activity", min=0, max=1, label="Credit card status", integral=True),
    FieldRange(name="home_ownership", min=0, max=1, label="Home ownership status", integral=True),
)

LOAN_TERM_FIELDS = ("loan_amount", "term", "interest_rate")


# Derives loan amount, term (months) and interest rate bounds as (name, min, max, label)
def _loan_term_bounds(providers: List[LoanProvider]) -> List[Tuple[str, float, float, str]]:
    if not providers:
        raise ConfigurationError("loan_amount", "Cannot derive loan term ranges without any provider")

    durations = [rate.duration_years for p in providers for rate in p.interest_rates]
    rates = [rate.rate for p in providers for rate in p.interest_rates]
    if not durations:
        raise ConfigurationError("term", "Providers publish no interest rates")

    return [
        (
            "loan_amount",
            min(p.minimum_loan_amount for p in providers),
            max(p.maximum_loan_amount for p in providers),
            "Loan amount",
        ),
        ("term", min(durations) * 12, max(durations) * 12, "Loan term (months)"),
        ("interest_rate", min(rates), max(rates), "Interest rate"),
    ]


def loan_term_ranges(providers: Iterable[LoanProvider]) -> List[FieldRange]:
    return [
        FieldRange(name=name, min=low, max=high, label=label)
        for name, low, high, label in _loan_term_bounds(list(providers))
    ]


class RangeRegistry:
    """Read-only lookup of field name to FieldRange."""

    def __init__(self, ranges: Iterable[FieldRange]):
        table: Dict[str, FieldRange] = {}
        for field_range in ranges:
            table[field_range.name] = field_range
        self._ranges: Mapping[str, FieldRange] = MappingProxyType(table)

    def get_range(self, field: str) -> FieldRange:
        try:
            return self._ranges[field]
        except KeyError:
            logger.error(f"Range lookup for unknown field '{field}'")
            raise ConfigurationError(field)

    def __contains__(self, field: str) -> bool:
        return field in self._ranges

    def __len__(self) -> int:
        return len(self._ranges)

    def names(self) -> List[str]:
        return list(self._ranges)

    def with_overrides(self, ranges: Iterable[FieldRange]) -> "RangeRegistry":
        merged = dict(self._ranges)
        for field_range in ranges:
            merged[field_range.name] = field_range
        return RangeRegistry(merged.values())

    # Scales loan terms against a single lender's limits instead of the whole marketplace
    # A bound the provider cannot span (one duration, one flat rate) keeps the current range
    def for_provider(self, provider: LoanProvider) -> "RangeRegistry":
        overrides = []
        for name, low, high, label in _loan_term_bounds([provider]):
            if low < high:
                overrides.append(FieldRange(name=name, min=low, max=high, label=label))
            else:
                logger.warning(f"{provider.name} publishes a single {name} value; keeping the shared range")
        return self.with_overrides(overrides)

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            name: {"min": r.min, "max": r.max, "integral": r.integral}
            for name, r in self._ranges.items()
        }

    @classmethod
    def default(cls, providers: Optional[Iterable[LoanProvider]] = None) -> "RangeRegistry":
        if providers is None:
            providers = [LoanProvider(**entry) for entry in LOAN_PROVIDERS_CATALOG]
        return cls(list(APPLICANT_RANGES) + loan_term_ranges(providers))


default_range_registry = RangeRegistry.default()
