# This project was developed with assistance from AI tools.
"""Profile completeness scorer inputs and report schemas."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class PersonalDetails(BaseModel):
    """The nine personal fields the scorer checks."""

    model_config = ConfigDict(from_attributes=True)

    full_name: str | None = None
    username: str | None = None
    phone: str | None = None
    date_of_birth: date | str | None = None
    gender: str | None = None
    occupation: str | None = None
    bio: str | None = None
    native_language: str | None = None
    preferred_contact_method: str | None = None


class ApplicationIntent(BaseModel):
    """Residency, income, and rental-preference answers as the scorer sees them.

    Status discriminants are plain strings so the scorer can treat an
    unrecognized value as unanswered instead of failing validation.
    """

    model_config = ConfigDict(from_attributes=True)

    is_citizen: bool | None = None
    visa_status: str | None = None
    employment_status: str | None = None
    employment_type: str | None = None
    income_source: str | None = None
    income_frequency: str | None = None
    income_amount: float | None = None
    student_status: str | None = None
    finance_support_type: str | None = None
    finance_support_details: str | None = None
    max_budget_per_week: Decimal | float | None = None
    preferred_locality: str | None = None


class CompletenessSection(BaseModel):
    """Derived per-section completion. Never persisted."""

    id: str
    title: str
    description: str
    required: bool
    percentage: int
    completed: bool


class CompletenessReport(BaseModel):
    """Overall completion across required sections plus earned badges."""

    sections: list[CompletenessSection]
    overall: int
    is_complete: bool
    badges: list[str] = []

    def section(self, section_id: str) -> CompletenessSection | None:
        return next((s for s in self.sections if s.id == section_id), None)
