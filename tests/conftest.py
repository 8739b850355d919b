import pytest

from loan_scoring.core.exceptions import PredictionServiceError
from loan_scoring.schemas.loan_schema import LoanContext
from tests.fakes import FakePredictionClient


@pytest.fixture
def fake_client():
    return FakePredictionClient()


@pytest.fixture
def timeout_client():
    return FakePredictionClient(error=PredictionServiceError(PredictionServiceError.TIMEOUT))


@pytest.fixture
def student_form():
    return {
        "annual_income": "600000",
        "debt_to_income": "20",
        "credit_score": "750",
        "person_age": "24",
        "Education": "4",
        "credit_risk": "30",
    }


@pytest.fixture
def agricultural_form():
    return {
        "annual_income": "450000",
        "debt_to_income": "35",
        "credit_score": "680",
        "person_age": "41",
        "Mortgage": "2500000",
        "person_home_ownership": "1",
        "emp_length": "15",
    }


@pytest.fixture
def business_form():
    return {
        "annual_income": "1200000",
        "debt_to_income": "28",
        "credit_score": "710",
        "person_age": "36",
        "emp_length": "8",
        "credit_card_usage": "45",
        "CreditCard": "1",
    }


@pytest.fixture
def student_context():
    return LoanContext(loan_type="student", amount=200000, term_months=36, interest_rate=9)


@pytest.fixture
def agricultural_context():
    return LoanContext(loan_type="agricultural", amount=500000, term_months=60, interest_rate=9.5)


@pytest.fixture
def business_context():
    return LoanContext(loan_type="business", amount=1000000, term_months=12, interest_rate=8.75)
