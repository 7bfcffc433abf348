"""
Declaration validator unit tests
"""
import pytest
from decimal import Decimal
from types import SimpleNamespace

from app.core.error_handling import ValidationException
from app.services.declaration_validator import validate_declaration


def declaration(**overrides) -> dict:
    values = {
        "name": "John Doe",
        "temperature": Decimal("36.5"),
        "has_symptoms": False,
        "symptoms": None,
        "has_contact": False,
        "contact_details": None,
    }
    values.update(overrides)
    return values


def stored(symptoms=None, contact_details=None) -> SimpleNamespace:
    return SimpleNamespace(symptoms=symptoms, contact_details=contact_details)


def assert_rejects(values, field, existing=None):
    with pytest.raises(ValidationException) as exc_info:
        validate_declaration(values, existing=existing)
    assert exc_info.value.field == field
    assert exc_info.value.status_code == 400
    return exc_info.value


@pytest.mark.unit
def test_valid_declaration_passes():
    validate_declaration(declaration())
    validate_declaration(declaration(has_symptoms=True, symptoms="cough, fever"))
    validate_declaration(declaration(has_contact=True, contact_details="Sister tested positive"))


@pytest.mark.unit
@pytest.mark.parametrize("name", ["A", "", "   ", "J" * 101, "John123", "Jane_Doe", None])
def test_invalid_names_rejected(name):
    assert_rejects(declaration(name=name), "name")


@pytest.mark.unit
@pytest.mark.parametrize("name", ["Jo", "Mary-Jane O'Neil", "Smith, J.", "J" * 100])
def test_name_punctuation_allowed(name):
    validate_declaration(declaration(name=name))


@pytest.mark.unit
@pytest.mark.parametrize("temperature", ["29.99", "45.01", "50", "36.555", None])
def test_invalid_temperatures_rejected(temperature):
    value = Decimal(temperature) if temperature is not None else None
    assert_rejects(declaration(temperature=value), "temperature")


@pytest.mark.unit
@pytest.mark.parametrize("temperature", ["30", "45", "45.00", "37.25", "36.500"])
def test_temperature_bounds_inclusive(temperature):
    validate_declaration(declaration(temperature=Decimal(temperature)))


@pytest.mark.unit
def test_name_checked_before_temperature():
    assert_rejects(declaration(name="A", temperature=Decimal("50")), "name")


@pytest.mark.unit
@pytest.mark.parametrize("symptoms", [None, "", "   \t"])
def test_symptoms_required_when_flagged(symptoms):
    error = assert_rejects(declaration(has_symptoms=True, symptoms=symptoms), "symptoms")
    assert error.message == "Symptoms must be provided when hasSymptoms is true"


@pytest.mark.unit
@pytest.mark.parametrize("contact_details", [None, "", "  "])
def test_contact_details_required_when_flagged(contact_details):
    assert_rejects(declaration(has_contact=True, contact_details=contact_details), "contact_details")


@pytest.mark.unit
def test_detail_lengths_limited():
    assert_rejects(declaration(symptoms="x" * 501), "symptoms")
    assert_rejects(declaration(contact_details="x" * 1001), "contact_details")
    validate_declaration(declaration(symptoms="x" * 500, contact_details="x" * 1000))


@pytest.mark.unit
def test_update_validates_only_sent_fields():
    validate_declaration({"status": "approved"}, existing=stored())
    validate_declaration({}, existing=stored())
    assert_rejects({"name": "A"}, "name", existing=stored())
    assert_rejects({"temperature": Decimal("29")}, "temperature", existing=stored())


@pytest.mark.unit
def test_update_rejects_nulling_required_fields():
    assert_rejects({"name": None}, "name", existing=stored())
    assert_rejects({"status": None}, "status", existing=stored())


@pytest.mark.unit
def test_update_flag_without_detail_uses_stored_detail():
    assert_rejects({"has_symptoms": True}, "symptoms", existing=stored())
    assert_rejects({"has_symptoms": True, "symptoms": " "}, "symptoms", existing=stored(symptoms=""))
    validate_declaration({"has_symptoms": True}, existing=stored(symptoms="cough"))
    validate_declaration({"has_symptoms": True, "symptoms": "fever"}, existing=stored())

    assert_rejects({"has_contact": True}, "contact_details", existing=stored())
    validate_declaration({"has_contact": True}, existing=stored(contact_details="Roommate"))


@pytest.mark.unit
def test_update_clearing_detail_without_flag_is_allowed():
    validate_declaration({"symptoms": ""}, existing=stored(symptoms="cough"))


@pytest.mark.unit
def test_update_keeps_flag_when_detail_cleared_but_stored():
    # The stored detail satisfies the rule even when the patch clears it
    validate_declaration(
        {"has_symptoms": True, "symptoms": None}, existing=stored(symptoms="cough")
    )
    validate_declaration(
        {"has_contact": True, "contact_details": None}, existing=stored(contact_details="office")
    )
