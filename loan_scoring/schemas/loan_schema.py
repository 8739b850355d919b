from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union


class LoanTypeEnum(str, Enum):
    student = "student"
    agricultural = "agricultural"
    business = "business"

    @classmethod
    def normalize(cls, value: Any) -> "LoanTypeEnum":
        """Accepts both the scoring vocabulary and the provider catalog one."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        key = PROVIDER_LOAN_TYPE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Invalid loan type: {value}")


# Provider catalog uses education/agriculture for the same products
PROVIDER_LOAN_TYPE_ALIASES = {
    "education": "student",
    "agriculture": "agricultural",
}


class InterestRate(BaseModel):
    duration_years: int = Field(..., gt=0)
    rate: float = Field(..., ge=0)

class ProviderTaxes(BaseModel):
    processing_fee_pct: float = Field(..., ge=0)
    documentation_charges: float = Field(0, ge=0)
    gst_pct: float = Field(..., ge=0)

class LoanProvider(BaseModel):
    """A lender in the marketplace and its rate card."""
    provider_id: str
    name: str
    interest_rates: List[InterestRate]
    taxes: ProviderTaxes
    terms_and_conditions: List[str] = []
    minimum_loan_amount: float = Field(..., gt=0)
    maximum_loan_amount: float = Field(..., gt=0)
    supported_loan_types: List[str]
    processing_time: str

    def rate_for(self, duration_years: int) -> Optional[float]:
        for entry in self.interest_rates:
            if entry.duration_years == duration_years:
                return entry.rate
        return None

    def supports(self, loan_type: LoanTypeEnum) -> bool:
        return any(
            LoanTypeEnum.normalize(supported) == loan_type
            for supported in self.supported_loan_types
        )


class LoanContext(BaseModel):
    """Loan terms produced by the loan calculator step."""
    loan_type: LoanTypeEnum
    amount: float = Field(..., gt=0)
    term_months: int = Field(..., gt=0)
    interest_rate: float = Field(..., ge=0)
    monthly_payment: float = Field(0.0, ge=0)
    processing_fee: float = Field(0.0, ge=0)

    @field_validator("loan_type", mode="before")
    @classmethod
    def _normalize_loan_type(cls, value):
        return LoanTypeEnum.normalize(value)


class CommonFields(BaseModel):
    annual_income: float
    debt_to_income: float
    credit_score: float
    person_age: float

class StudentFields(BaseModel):
    loan_type: Literal["student"] = "student"
    education_level: int
    credit_risk: float

class AgriculturalFields(BaseModel):
    loan_type: Literal["agricultural"] = "agricultural"
    mortgage: float
    home_ownership: int
    emp_length: float

class BusinessFields(BaseModel):
    loan_type: Literal["business"] = "business"
    emp_length: float
    credit_card_usage: float
    credit_card_activity: int

LoanTypeFields = Annotated[
    Union[StudentFields, AgriculturalFields, BusinessFields],
    Field(discriminator="loan_type"),
]

class ValidatedApplication(BaseModel):
    """Parsed applicant fields, split into the common part and one loan-type variant."""
    common: CommonFields
    details: LoanTypeFields

    @property
    def loan_type(self) -> LoanTypeEnum:
        return LoanTypeEnum(self.details.loan_type)


class ValidationResult(BaseModel):
    is_valid: bool
    error: Optional[str] = None
    field: Optional[str] = None
    reason: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    application: Optional[ValidatedApplication] = Field(None, exclude=True)


class FeatureVector(BaseModel):
    """
    Standardized request body for the approval prediction service.

    Every key is always serialized; fields that do not belong to the
    current loan type are sent as null.
    """
    model_config = ConfigDict(populate_by_name=True)

    loan_type: LoanTypeEnum
    loan_amount: float
    term: float
    int_rate: float
    annual_income: float
    debt_to_income: float
    credit_score: float
    person_age: float
    income_to_loan: float
    education_level: Optional[float] = Field(None, alias="Education")
    credit_risk: Optional[float] = None
    mortgage: Optional[float] = Field(None, alias="Mortgage")
    home_ownership: Optional[float] = Field(None, alias="person_home_ownership")
    emp_length: Optional[float] = None
    credit_card_usage: Optional[float] = None
    credit_card_activity: Optional[float] = Field(None, alias="CreditCard")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class LoanDecision(BaseModel):
    approved: bool
    confidence: float = Field(..., ge=0, le=100)
    feedback: List[str] = []


class SubmissionResult(BaseModel):
    success: bool
    data: Optional[LoanDecision] = None
    error: Optional[str] = None
    field: Optional[str] = None


class LoanCalculationRequest(BaseModel):
    loan_amount: float = Field(..., gt=0)
    duration_years: int = Field(1, gt=0)
    loan_type: Optional[LoanTypeEnum] = None

    @field_validator("loan_type", mode="before")
    @classmethod
    def _normalize_loan_type(cls, value):
        if value is None:
            return None
        return LoanTypeEnum.normalize(value)

class LoanCalculation(BaseModel):
    monthly_payment: float
    total_interest: float
    processing_fee: float
    documentation_charges: float
    gst_amount: float
    total_amount: float

class LoanCalculationResponse(BaseModel):
    provider_id: str
    calculation: LoanCalculation
    loan_context: LoanContext


class LoanApprovalRequest(BaseModel):
    """The request body for an approval prediction: raw form values plus the calculated loan terms."""
    form_data: Dict[str, Any]
    loan_context: LoanContext
    provider_id: Optional[str] = Field(None, description="Scale loan terms against this provider's limits")


class PreparedRequest(BaseModel):
    """Outcome of validating and standardizing one submission, before any network call."""
    is_valid: bool
    error: Optional[str] = None
    field: Optional[str] = None
    reason: Optional[str] = None
    vector: Optional[FeatureVector] = None
