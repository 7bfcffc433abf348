"""
Pydantic schemas for health declarations

The JSON surface is camelCase (hasSymptoms, contactDetails, createdAt, ...);
attributes stay snake_case and either spelling is accepted on input.
"""

from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models.health_declaration import DeclarationStatus


class HealthDeclarationInput(BaseModel):
    """Common config for request bodies: trimmed strings, unknown fields rejected"""
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "extra": "forbid",
    }

    @field_validator("temperature", mode="before", check_fields=False)
    @classmethod
    def temperature_from_text(cls, value):
        """Floats go through their shortest repr so 36.6 stays 36.6, not 36.6000000000000014"""
        if isinstance(value, float):
            return str(value)
        return value

    @field_validator("has_symptoms", "has_contact", mode="before", check_fields=False)
    @classmethod
    def flag_from_form_value(cls, value):
        """Only the string "true" (any case) counts as true; other values use their truthiness"""
        if value is None:
            return value
        if isinstance(value, str):
            return value.lower() == "true"
        return bool(value)


class HealthDeclarationCreate(HealthDeclarationInput):
    """Request to submit a new declaration"""
    name: str = Field(..., description="Full name of the person declaring", examples=["John Doe"])
    temperature: Decimal = Field(..., description="Temperature in Celsius (30-45)", examples=[36.5])
    has_symptoms: bool = Field(..., description="Any COVID-19 symptoms in the last 14 days")
    symptoms: Optional[str] = Field(None, description="Symptoms, required if hasSymptoms is true")
    has_contact: bool = Field(..., description="Contact with a COVID-19 case in the last 14 days")
    contact_details: Optional[str] = Field(None, description="Contact details, required if hasContact is true")


class HealthDeclarationUpdate(HealthDeclarationInput):
    """Update declaration (partial); typically used by administrators to change status"""
    name: Optional[str] = None
    temperature: Optional[Decimal] = None
    has_symptoms: Optional[bool] = None
    symptoms: Optional[str] = None
    has_contact: Optional[bool] = None
    contact_details: Optional[str] = None
    status: Optional[DeclarationStatus] = None


class HealthDeclarationResponse(BaseModel):
    """Response with a stored declaration"""
    id: str
    name: str
    temperature: float
    has_symptoms: bool
    symptoms: Optional[str] = None
    has_contact: bool
    contact_details: Optional[str] = None
    status: DeclarationStatus
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class PaginatedHealthDeclarations(BaseModel):
    """Pagination envelope for list queries"""
    data: List[HealthDeclarationResponse]
    total: int
    page: int
    limit: int
    total_pages: int

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class HealthDeclarationStats(BaseModel):
    """Aggregate counts"""
    total: int
    pending: int
    approved: int
    rejected: int
    today_submissions: int

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }
