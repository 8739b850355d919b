import pytest

from loan_scoring.core.exceptions import ConfigurationError, RangeError, ValidationError
from loan_scoring.core.ranges import default_range_registry
from loan_scoring.schemas.loan_schema import LoanContext
from loan_scoring.services.loan_provider_service import loan_provider_service
from loan_scoring.services.standardizer import Standardizer, standardize
from loan_scoring.services.validator import ApplicationValidator

CROSS_TYPE_FIELDS = {
    "student": ["Mortgage", "person_home_ownership", "emp_length", "credit_card_usage", "CreditCard"],
    "agricultural": ["Education", "credit_risk", "credit_card_usage", "CreditCard"],
    "business": ["Education", "credit_risk", "Mortgage", "person_home_ownership"],
}

SCALED_FIELDS = [
    name for name in default_range_registry.names()
    if not default_range_registry.get_range(name).is_binary
]


def _validated(form, loan_type):
    result = ApplicationValidator().validate(form, loan_type)
    assert result.is_valid, result.error
    return result.application


@pytest.mark.parametrize("target", [(0.0, 1.0), (-1.0, 1.0)])
@pytest.mark.parametrize("field", SCALED_FIELDS)
def test_bounds_map_to_target_ends(field, target):
    field_range = default_range_registry.get_range(field)
    assert standardize(field_range.min, field_range.min, field_range.max, target=target) == target[0]
    assert standardize(field_range.max, field_range.min, field_range.max, target=target) == target[1]


def test_midpoint_and_linearity():
    assert standardize(50, 0, 100) == pytest.approx(0.5)
    assert standardize(50, 0, 100, target=(-1, 1)) == pytest.approx(0.0)
    assert standardize(575, 300, 850) == pytest.approx(0.5)


def test_standardize_is_repeatable():
    assert standardize(742.0, 300, 850) == standardize(742.0, 300, 850)


def test_strict_path_rejects_out_of_range_values():
    with pytest.raises(RangeError) as exc_info:
        standardize(900, 300, 850, field="credit_score")
    error = exc_info.value
    assert (error.field, error.value, error.min, error.max) == ("credit_score", 900, 300, 850)


def test_clamp_path_pulls_values_to_bounds():
    assert standardize(900, 300, 850, clamp=True) == 1.0
    assert standardize(-5, 0, 100, target=(-1, 1), clamp=True) == -1.0


def test_non_finite_values_are_rejected_even_when_clamping():
    with pytest.raises(RangeError):
        standardize(float("nan"), 0, 100, clamp=True)


def test_precision_rounds_the_result():
    assert standardize(1, 0, 3, target=(-1, 1), precision=4) == -0.3333


def test_invalid_bounds_are_configuration_errors():
    with pytest.raises(ConfigurationError):
        standardize(1, 5, 5)
    with pytest.raises(ConfigurationError):
        standardize(1, 0, 5, target=(1, 1))
    with pytest.raises(ConfigurationError):
        Standardizer(target=(1.0, -1.0))


def test_student_payload(student_form, student_context):
    vector = Standardizer().build(_validated(student_form, "student"), student_context)
    payload = vector.to_payload()

    assert payload["loan_type"] == "student"
    assert payload["income_to_loan"] == pytest.approx(3.0)
    assert payload["annual_income"] == pytest.approx(600000 / 100_000_000)
    assert payload["credit_score"] == pytest.approx(450 / 550)
    assert payload["person_age"] == pytest.approx(6 / 62)
    assert payload["debt_to_income"] == pytest.approx(0.2)
    assert payload["Education"] == pytest.approx(0.75)
    assert payload["credit_risk"] == pytest.approx(0.3)
    assert payload["loan_amount"] == pytest.approx(100000 / 9900000)
    assert payload["term"] == pytest.approx(0.5)
    assert payload["int_rate"] == pytest.approx(0.5 / 1.35)
    for field in CROSS_TYPE_FIELDS["student"]:
        assert field in payload
        assert payload[field] is None


def test_agricultural_payload(agricultural_form, agricultural_context):
    payload = Standardizer().build(_validated(agricultural_form, "agricultural"), agricultural_context).to_payload()

    assert payload["loan_type"] == "agricultural"
    assert payload["Mortgage"] == pytest.approx(0.025)
    assert payload["person_home_ownership"] == 1.0
    assert payload["emp_length"] == pytest.approx(0.3)
    assert payload["term"] == 1.0
    for field in CROSS_TYPE_FIELDS["agricultural"]:
        assert payload[field] is None


def test_business_payload(business_form, business_context):
    payload = Standardizer().build(_validated(business_form, "business"), business_context).to_payload()

    assert payload["loan_type"] == "business"
    assert payload["emp_length"] == pytest.approx(0.16)
    assert payload["credit_card_usage"] == pytest.approx(0.45)
    assert payload["CreditCard"] == 1.0
    assert payload["income_to_loan"] == pytest.approx(1.2)
    assert payload["term"] == 0.0
    for field in CROSS_TYPE_FIELDS["business"]:
        assert payload[field] is None


def test_payload_always_has_every_key(student_form, student_context):
    payload = Standardizer().build(_validated(student_form, "student"), student_context).to_payload()
    assert set(payload) == {
        "loan_type", "loan_amount", "term", "int_rate", "annual_income", "debt_to_income",
        "credit_score", "person_age", "income_to_loan", "Education", "credit_risk", "Mortgage",
        "person_home_ownership", "emp_length", "credit_card_usage", "CreditCard",
    }


def test_flags_are_not_rescaled_with_symmetric_target(business_form, business_context):
    business_form["CreditCard"] = "0"
    payload = Standardizer(target=(-1.0, 1.0)).build(_validated(business_form, "business"), business_context).to_payload()
    assert payload["CreditCard"] == 0.0
    assert payload["credit_card_usage"] == pytest.approx(-0.1)


def test_loan_terms_outside_catalog_are_clamped(student_form):
    context = LoanContext(loan_type="student", amount=50_000_000, term_months=120, interest_rate=3)
    payload = Standardizer().build(_validated(student_form, "student"), context).to_payload()

    assert payload["loan_amount"] == 1.0
    assert payload["term"] == 1.0
    assert payload["int_rate"] == 0.0
    assert payload["income_to_loan"] == pytest.approx(600000 / 50_000_000)


def test_provider_registry_changes_loan_term_scaling(student_form, student_context):
    hdfc_registry = default_range_registry.for_provider(loan_provider_service.get_provider("hdfc"))
    payload = Standardizer().build(_validated(student_form, "student"), student_context, registry=hdfc_registry).to_payload()
    assert payload["loan_amount"] == 0.0


def test_loan_type_mismatch_is_rejected(student_form, business_context):
    with pytest.raises(ValidationError) as exc_info:
        Standardizer().build(_validated(student_form, "student"), business_context)
    assert exc_info.value.field == "loan_type"
