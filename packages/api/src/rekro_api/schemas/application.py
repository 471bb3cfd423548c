# This project was developed with assistance from AI tools.
"""Application request/response schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from rekro_db.enums import ApplicationStatus, ApplicationType, OccupancyType

from . import Pagination
from .snapshot import SnapshotResponse


class Inclusion(BaseModel):
    """One priced add-on: furniture, bills, cleaning, carpark, or storage."""

    selected: bool = False
    price: float = Field(default=0, ge=0)


class ApplicationUpsert(BaseModel):
    """Create (no id) or update (with id) an application.

    ``property_id`` and ``application_type`` are checked by the lifecycle
    service so a missing value surfaces as a 400 rather than a schema error.
    ``inclusions`` is validated strictly by the service as well.
    """

    id: int | None = None
    property_id: int | None = None
    unit_id: int | None = None
    application_type: ApplicationType | None = None
    move_in_date: date | None = None
    rental_duration: int | None = Field(default=None, ge=1)
    proposed_rent: Decimal | None = Field(default=None, ge=0)
    total_rent: Decimal | None = Field(default=None, ge=0)
    inclusions: dict[str, Any] = Field(default_factory=dict)
    occupancy_type: OccupancyType = OccupancyType.SINGLE
    message: str | None = None


class ApplicationResponse(BaseModel):
    """Single application response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    applicant_id: str
    property_id: int
    unit_id: int | None = None
    application_type: ApplicationType
    status: ApplicationStatus
    message: str | None = None
    move_in_date: date | None = None
    rental_duration: int | None = None
    proposed_rent: Decimal | None = None
    total_rent: Decimal | None = None
    inclusions: dict[str, Inclusion] = {}
    occupancy_type: OccupancyType = OccupancyType.SINGLE
    created_at: datetime
    submitted_at: datetime | None = None
    updated_at: datetime


class ApplicationListResponse(BaseModel):
    """Paginated list of applications."""

    data: list[ApplicationResponse]
    pagination: Pagination


class StatusUpdateRequest(BaseModel):
    """Reviewer status change."""

    status: ApplicationStatus


class WithdrawRequest(BaseModel):
    """Applicant withdrawal. ``confirm`` must be true."""

    confirm: bool = False


class SubmitRequest(BaseModel):
    note: str | None = None


class SubmitResponse(BaseModel):
    """Submitted application together with the snapshot written for it."""

    application: ApplicationResponse
    snapshot: SnapshotResponse
