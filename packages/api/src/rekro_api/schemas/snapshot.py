# This project was developed with assistance from AI tools.
"""Application snapshot schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from . import Pagination


class SnapshotCreateRequest(BaseModel):
    note: str | None = None


class SnapshotResponse(BaseModel):
    """One frozen copy of application terms and the applicant profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    snapshot: dict[str, Any]
    created_by: str
    note: str | None = None
    created_at: datetime


class SnapshotListResponse(BaseModel):
    """Paginated snapshots, newest first."""

    data: list[SnapshotResponse]
    pagination: Pagination


class SnapshotComparison(BaseModel):
    """Two snapshots of the same application, side by side."""

    left: SnapshotResponse
    right: SnapshotResponse
