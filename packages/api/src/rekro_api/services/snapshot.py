# This project was developed with assistance from AI tools.
"""Application snapshot store.

A snapshot freezes the application's lease terms together with the
applicant's profile, finance and rental-preference answers, and document
registry at one instant. Rows are append-only; the ORM refuses updates.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from rekro_db import Application, ApplicationSnapshot, User
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, ValidationError
from ..schemas.auth import UserContext
from .access import load_application, require_user
from .persistence import unit_of_work, utcnow
from .profile import load_user

logger = logging.getLogger(__name__)

_NEWEST_FIRST = (ApplicationSnapshot.created_at.desc(), ApplicationSnapshot.id.desc())


def _json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime | date):
        return value.isoformat()
    return getattr(value, "value", value)


def build_snapshot_payload(
    application: Application,
    applicant: User | None,
    *,
    submitted_at: datetime,
) -> dict[str, Any]:
    """Assemble the frozen payload. Lease terms are copied verbatim from the row."""
    intent = applicant.application_profile if applicant is not None else None

    def _user(field: str) -> Any:
        return _json_value(getattr(applicant, field, None)) if applicant is not None else None

    def _intent(field: str) -> Any:
        return _json_value(getattr(intent, field, None)) if intent is not None else None

    return {
        "lease": {
            "propertyId": application.property_id,
            "unitId": application.unit_id,
            "applicationType": _json_value(application.application_type),
            "moveInDate": _json_value(application.move_in_date),
            "rentalDuration": application.rental_duration,
            "proposedRent": _json_value(application.proposed_rent),
            "totalRent": _json_value(application.total_rent),
            "inclusions": dict(application.inclusions or {}),
            "occupancyType": _json_value(application.occupancy_type),
            "message": application.message,
            "submittedAt": submitted_at.isoformat(),
        },
        "profile": {
            "fullName": _user("full_name"),
            "email": _user("email"),
            "phone": _user("phone"),
            "dateOfBirth": _user("date_of_birth"),
            "gender": _user("gender"),
            "occupation": _user("occupation"),
            "bio": _user("bio"),
            "nativeLanguage": _user("native_language"),
            "isCitizen": _intent("is_citizen"),
            "visaStatus": _intent("visa_status"),
        },
        "finance": {
            "employmentStatus": _intent("employment_status"),
            "employmentType": _intent("employment_type"),
            "incomeSource": _intent("income_source"),
            "incomeFrequency": _intent("income_frequency"),
            "incomeAmount": _intent("income_amount"),
            "studentStatus": _intent("student_status"),
            "financeSupportType": _intent("finance_support_type"),
            "financeSupportDetails": _intent("finance_support_details"),
        },
        "rental": {
            "preferredLocality": _intent("preferred_locality"),
            "maxBudgetPerWeek": _intent("max_budget_per_week"),
            "hasPets": _intent("has_pets"),
            "smoker": _intent("smoker"),
            "emergencyContactName": _intent("emergency_contact_name"),
            "emergencyContactPhone": _intent("emergency_contact_phone"),
        },
        "documents": dict(intent.documents or {}) if intent is not None else {},
    }


async def write_snapshot(
    session: AsyncSession,
    application: Application,
    user: UserContext,
    note: str | None = None,
    *,
    submitted_at: datetime | None = None,
) -> ApplicationSnapshot:
    """Stage a snapshot in the current transaction without committing."""
    applicant = await load_user(session, application.applicant_id)
    payload = build_snapshot_payload(
        application, applicant, submitted_at=submitted_at or utcnow(),
    )
    snapshot = ApplicationSnapshot(
        application_id=application.id,
        snapshot=payload,
        created_by=user.user_id,
        note=note or None,
        created_at=utcnow(),
    )
    session.add(snapshot)
    await session.flush()
    return snapshot


async def create_snapshot(
    session: AsyncSession,
    user: UserContext | None,
    application_id: int,
    note: str | None = None,
) -> ApplicationSnapshot:
    """Freeze the application's current terms and the applicant's profile."""
    user = require_user(user)
    application = await load_application(session, user, application_id, allow_reviewer=False)

    async with unit_of_work(session, "create snapshot"):
        snapshot = await write_snapshot(session, application, user, note)
        snapshot_id = snapshot.id
    logger.info("Snapshot %s created for application=%s by %s", snapshot_id, application_id, user.user_id)
    return snapshot


async def list_snapshots(
    session: AsyncSession,
    user: UserContext | None,
    application_id: int,
    *,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[ApplicationSnapshot], int]:
    """Snapshots for one application, newest first."""
    await load_application(session, user, application_id)

    count_stmt = select(func.count(ApplicationSnapshot.id)).where(
        ApplicationSnapshot.application_id == application_id
    )
    total = (await session.execute(count_stmt)).scalar() or 0

    stmt = (
        select(ApplicationSnapshot)
        .where(ApplicationSnapshot.application_id == application_id)
        .order_by(*_NEWEST_FIRST)
        .offset(offset)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all()), total


async def get_latest_snapshot(
    session: AsyncSession,
    user: UserContext | None,
    application_id: int,
) -> ApplicationSnapshot | None:
    """Most recent snapshot, or None when none has been written yet."""
    await load_application(session, user, application_id)
    stmt = (
        select(ApplicationSnapshot)
        .where(ApplicationSnapshot.application_id == application_id)
        .order_by(*_NEWEST_FIRST)
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_snapshot(
    session: AsyncSession,
    user: UserContext | None,
    application_id: int,
    snapshot_id: int,
) -> ApplicationSnapshot:
    """One snapshot; it must belong to ``application_id``."""
    await load_application(session, user, application_id)
    stmt = select(ApplicationSnapshot).where(
        ApplicationSnapshot.id == snapshot_id,
        ApplicationSnapshot.application_id == application_id,
    )
    snapshot = (await session.execute(stmt)).scalar_one_or_none()
    if snapshot is None:
        raise NotFoundError(f"Snapshot {snapshot_id} not found for application {application_id}")
    return snapshot


async def compare_snapshots(
    session: AsyncSession,
    user: UserContext | None,
    application_id: int,
    left_id: int,
    right_id: int,
) -> tuple[ApplicationSnapshot, ApplicationSnapshot]:
    """Return both snapshots so the caller can diff their payloads."""
    if left_id is None or right_id is None:
        raise ValidationError("Both left and right snapshot ids are required")
    left = await get_snapshot(session, user, application_id, left_id)
    right = await get_snapshot(session, user, application_id, right_id)
    return left, right
