"""
Declaration Validator
Field and cross-field rules checked before a declaration is stored
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from app.core.error_handling import ValidationException

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-',.]+$")

TEMPERATURE_MIN = Decimal("30")
TEMPERATURE_MAX = Decimal("45")
TEMPERATURE_STEP = Decimal("0.01")

SYMPTOMS_MAX_LENGTH = 500
CONTACT_DETAILS_MAX_LENGTH = 1000

# Columns that are NOT NULL; a patch may omit them but not null them
NON_NULLABLE_FIELDS = ("name", "temperature", "has_symptoms", "has_contact", "status")


def _has_text(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def _validate_name(name: Any) -> None:
    if not isinstance(name, str) or not name.strip():
        raise ValidationException("Name is required", field="name")
    name = name.strip()
    if len(name) < NAME_MIN_LENGTH:
        raise ValidationException(
            f"Name must be at least {NAME_MIN_LENGTH} characters long", field="name"
        )
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationException(
            f"Name must not exceed {NAME_MAX_LENGTH} characters", field="name"
        )
    if not NAME_PATTERN.match(name):
        raise ValidationException(
            "Name can only contain letters, spaces, hyphens, apostrophes, commas, and periods",
            field="name",
        )


def _validate_temperature(temperature: Any) -> None:
    if temperature is None or isinstance(temperature, bool):
        raise ValidationException("Temperature is required", field="temperature")
    try:
        value = Decimal(str(temperature))
    except (InvalidOperation, ValueError):
        raise ValidationException("Temperature must be a number", field="temperature")
    if not value.is_finite():
        raise ValidationException("Temperature must be a number", field="temperature")
    if value < TEMPERATURE_MIN:
        raise ValidationException("Temperature must be at least 30°C", field="temperature")
    if value > TEMPERATURE_MAX:
        raise ValidationException("Temperature must not exceed 45°C", field="temperature")
    if value != value.quantize(TEMPERATURE_STEP):
        raise ValidationException(
            "Temperature must have at most 2 decimal places", field="temperature"
        )


def _validate_length(values: Mapping[str, Any], field: str, max_length: int, label: str) -> None:
    value = values.get(field)
    if value is not None and len(value) > max_length:
        raise ValidationException(f"{label} must not exceed {max_length} characters", field=field)


def validate_declaration(values: Mapping[str, Any], existing: Optional[Any] = None) -> None:
    """
    Validate declaration fields, raising ValidationException on the first violation.

    Args:
        values: Candidate field values keyed by attribute name. The full
            submission on create; only the fields being changed on update.
        existing: The stored declaration when validating an update, None on create.

    On update the symptom/contact rule only fires when the flag is sent as true
    and neither the patch nor the stored record has a non-empty detail.
    """
    is_update = existing is not None

    if is_update:
        for field in NON_NULLABLE_FIELDS:
            if field in values and values[field] is None:
                raise ValidationException(f"{field} must not be null", field=field)

    if not is_update or "name" in values:
        _validate_name(values.get("name"))

    if not is_update or "temperature" in values:
        _validate_temperature(values.get("temperature"))

    if not is_update:
        for field in ("has_symptoms", "has_contact"):
            if not isinstance(values.get(field), bool):
                raise ValidationException(f"{field} must be a boolean", field=field)

    _validate_length(values, "symptoms", SYMPTOMS_MAX_LENGTH, "Symptoms")
    _validate_length(values, "contact_details", CONTACT_DETAILS_MAX_LENGTH, "Contact details")

    if values.get("has_symptoms") and not _has_text(values.get("symptoms")):
        if not is_update or not _has_text(existing.symptoms):
            raise ValidationException(
                "Symptoms must be provided when hasSymptoms is true", field="symptoms"
            )

    if values.get("has_contact") and not _has_text(values.get("contact_details")):
        if not is_update or not _has_text(existing.contact_details):
            raise ValidationException(
                "Contact details must be provided when hasContact is true",
                field="contact_details",
            )
