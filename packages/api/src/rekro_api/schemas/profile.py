# This project was developed with assistance from AI tools.
"""Applicant profile and document registry schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from rekro_db.enums import EmploymentStatus, StudentStatus


class DocumentRef(BaseModel):
    """Metadata for one registered document. Only ``path`` is required."""

    path: str = Field(min_length=1)
    url: str | None = None
    filename: str | None = None
    uploaded_at: str | None = None


class IntentFields(BaseModel):
    """Residency, income, and rental-preference answers on the intent record."""

    model_config = ConfigDict(from_attributes=True)

    is_citizen: bool | None = None
    visa_status: str | None = None
    employment_status: EmploymentStatus | None = None
    employment_type: str | None = None
    income_source: str | None = None
    income_frequency: str | None = None
    income_amount: float | None = None
    student_status: StudentStatus | None = None
    finance_support_type: str | None = None
    finance_support_details: str | None = None
    max_budget_per_week: Decimal | None = Field(default=None, ge=0)
    preferred_locality: str | None = None
    has_pets: bool | None = None
    smoker: bool | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None


class PersonalFields(BaseModel):
    """Editable personal details on the user row."""

    model_config = ConfigDict(from_attributes=True)

    full_name: str | None = None
    username: str | None = None
    phone: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    occupation: str | None = None
    bio: str | None = None
    native_language: str | None = None
    preferred_contact_method: str | None = None
    image_url: str | None = None
    discoverable: bool | None = None


class ProfileUpdate(PersonalFields, IntentFields):
    """Partial profile update. Only fields present in the request are written."""


class ProfileResponse(PersonalFields):
    """Full applicant profile including the intent record and documents."""

    id: str
    email: str
    discoverable: bool = False
    intent: IntentFields = Field(default_factory=IntentFields)
    documents: dict[str, DocumentRef] = {}
