# This project was developed with assistance from AI tools.
"""Application lifecycle service.

Owns the status state machine and the upsert / submit / withdraw protocol:

- The first persisted write always lands as ``submitted``.
- Applicants edit terms in place while the application is submitted or under
  review, and may withdraw (with explicit confirmation) from those states.
- Reviewers (admin role) move applications to under_review, approved, or
  rejected.
- Approved, rejected, and withdrawn applications are locked.

Validation, ownership, and transition checks all run before anything is
written; every mutation is a single commit.
"""

import logging

from rekro_db import Application
from rekro_db.enums import ApplicationStatus, ApplicationType, OccupancyType
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.errors import InvalidTransitionError, ValidationError
from ..schemas.application import ApplicationUpsert
from ..schemas.auth import UserContext
from .access import load_application, require_user
from .catalog import validate_property_unit
from .completeness import is_profile_complete
from .inclusions import dump_inclusions, parse_inclusions
from .persistence import commit, unit_of_work, utcnow
from .profile import get_or_create_profile, load_user
from .snapshot import write_snapshot

logger = logging.getLogger(__name__)

_EDITABLE_STATUSES = ApplicationStatus.editable_statuses()
_SUBMITTABLE_STATUSES = frozenset({ApplicationStatus.SUBMITTED, ApplicationStatus.UNDER_REVIEW})
_WITHDRAWABLE_STATUSES = frozenset({ApplicationStatus.SUBMITTED, ApplicationStatus.UNDER_REVIEW})
REVIEWER_TARGETS = frozenset(
    {ApplicationStatus.UNDER_REVIEW, ApplicationStatus.APPROVED, ApplicationStatus.REJECTED}
)


def _check_transition(current: ApplicationStatus, new_status: ApplicationStatus) -> None:
    allowed = ApplicationStatus.valid_transitions().get(current, frozenset())
    if new_status not in allowed:
        raise InvalidTransitionError(
            f"Cannot transition from '{current.value}' to '{new_status.value}'. "
            f"Allowed: {sorted(s.value for s in allowed) if allowed else 'none (terminal status)'}."
        )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

async def get_application(
    session: AsyncSession,
    user: UserContext | None,
    application_id: int,
) -> Application:
    """Return one application the caller owns (or any, for reviewers)."""
    return await load_application(session, user, application_id)


async def list_applications(
    session: AsyncSession,
    user: UserContext | None,
    *,
    offset: int = 0,
    limit: int = 20,
    status: ApplicationStatus | None = None,
) -> tuple[list[Application], int]:
    """Applications visible to the caller, most recently updated first."""
    user = require_user(user)

    def _scoped(stmt):
        if not user.is_reviewer:
            stmt = stmt.where(Application.applicant_id == user.user_id)
        if status is not None:
            stmt = stmt.where(Application.status == status)
        return stmt

    total = (await session.execute(_scoped(select(func.count(Application.id))))).scalar() or 0

    stmt = _scoped(
        select(Application)
        .order_by(Application.updated_at.desc(), Application.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all()), total


# ---------------------------------------------------------------------------
# Upsert
# ---------------------------------------------------------------------------

async def upsert_application(
    session: AsyncSession,
    user: UserContext | None,
    data: ApplicationUpsert,
) -> tuple[Application, bool]:
    """Create (no id) or update (with id) an application.

    Returns ``(application, created)``.
    """
    user = require_user(user)

    if data.property_id is None or data.application_type is None:
        raise ValidationError("Missing required fields: property_id and application_type")
    inclusions = dump_inclusions(parse_inclusions(data.inclusions, strict=True))
    await validate_property_unit(session, data.property_id, data.unit_id)

    if data.id is None:
        return await _create(session, user, data, inclusions), True
    return await _update(session, user, data, inclusions), False


def _apply_terms(application: Application, data: ApplicationUpsert, inclusions: dict) -> None:
    application.property_id = data.property_id
    application.unit_id = data.unit_id
    application.application_type = ApplicationType(data.application_type)
    application.move_in_date = data.move_in_date
    application.rental_duration = data.rental_duration
    application.proposed_rent = data.proposed_rent
    application.total_rent = data.total_rent
    application.inclusions = inclusions
    application.occupancy_type = OccupancyType(data.occupancy_type)
    application.message = data.message or None


async def _create(
    session: AsyncSession,
    user: UserContext,
    data: ApplicationUpsert,
    inclusions: dict,
) -> Application:
    # The applicant row must exist before the foreign key can reference it
    await get_or_create_profile(session, user)

    now = utcnow()
    application = Application(
        applicant_id=user.user_id,
        status=ApplicationStatus.SUBMITTED,
        created_at=now,
        submitted_at=now,
        updated_at=now,
    )
    _apply_terms(application, data, inclusions)
    async with unit_of_work(session, "create application"):
        session.add(application)
        await session.flush()
        application_id = application.id

    logger.info("Application %s created by %s", application_id, user.user_id)
    return await load_application(session, user, application_id)


async def _update(
    session: AsyncSession,
    user: UserContext,
    data: ApplicationUpsert,
    inclusions: dict,
) -> Application:
    application = await load_application(session, user, data.id, allow_reviewer=False)

    if application.status not in _EDITABLE_STATUSES:
        logger.warning(
            "Rejected edit of application=%s in status %s", application.id, application.status.value
        )
        raise InvalidTransitionError(
            f"Application in status '{application.status.value}' can no longer be edited"
        )

    _apply_terms(application, data, inclusions)
    application.updated_at = utcnow()

    await commit(session, "update application")
    logger.info("Application %s updated by %s", application.id, user.user_id)
    return await load_application(session, user, application.id)


# ---------------------------------------------------------------------------
# Submit / withdraw / reviewer status change
# ---------------------------------------------------------------------------

async def submit_application(
    session: AsyncSession,
    user: UserContext | None,
    application_id: int,
    note: str | None = None,
):
    """Freeze the current terms and profile and refresh submission bookkeeping.

    The status itself is left as-is. Snapshot and bookkeeping are committed
    together; on failure neither is persisted.

    Returns ``(application, snapshot)``.
    """
    user = require_user(user)
    application = await load_application(session, user, application_id, allow_reviewer=False)

    if application.status not in _SUBMITTABLE_STATUSES:
        raise InvalidTransitionError(
            f"Application in status '{application.status.value}' cannot be submitted"
        )

    if settings.REQUIRE_COMPLETE_PROFILE:
        applicant = await load_user(session, user.user_id)
        if not is_profile_complete(applicant):
            raise ValidationError("Complete your profile before submitting an application")

    now = utcnow()
    async with unit_of_work(session, "submit application"):
        snapshot = await write_snapshot(session, application, user, note, submitted_at=now)
        snapshot_id = snapshot.id
        application.submitted_at = now
        application.updated_at = now

    logger.info(
        "Application %s submitted by %s (snapshot=%s)", application_id, user.user_id, snapshot_id
    )
    return await load_application(session, user, application_id), snapshot


async def withdraw_application(
    session: AsyncSession,
    user: UserContext | None,
    application_id: int,
    *,
    confirm: bool = False,
) -> Application:
    """Withdraw an application. Irreversible; requires ``confirm=True``."""
    user = require_user(user)
    if not confirm:
        raise ValidationError("Withdrawal must be explicitly confirmed")

    application = await load_application(session, user, application_id, allow_reviewer=False)
    current = application.status
    if current not in _WITHDRAWABLE_STATUSES:
        logger.warning("Rejected withdrawal of application=%s in status %s", application_id, current.value)
        raise InvalidTransitionError(f"Cannot withdraw an application in status '{current.value}'")

    application.status = ApplicationStatus.WITHDRAWN
    application.updated_at = utcnow()
    await commit(session, "withdraw application")
    logger.info("Application %s withdrawn by %s", application_id, user.user_id)
    return await load_application(session, user, application_id)


async def transition_status(
    session: AsyncSession,
    user: UserContext | None,
    application_id: int,
    new_status: ApplicationStatus,
) -> Application:
    """Reviewer status change, validated against the transition table."""
    user = require_user(user)
    new_status = ApplicationStatus(new_status)
    if new_status not in REVIEWER_TARGETS:
        raise InvalidTransitionError(
            f"Reviewers cannot set status '{new_status.value}'. "
            f"Allowed targets: {sorted(s.value for s in REVIEWER_TARGETS)}."
        )

    application = await load_application(session, user, application_id)
    current = application.status
    try:
        _check_transition(current, new_status)
    except InvalidTransitionError:
        logger.warning(
            "Rejected transition application=%s %s -> %s by %s",
            application_id,
            current.value,
            new_status.value,
            user.user_id,
        )
        raise

    application.status = new_status
    application.updated_at = utcnow()
    await commit(session, "change application status")
    logger.info(
        "Application %s moved %s -> %s by %s", application_id, current.value, new_status.value, user.user_id
    )
    return await load_application(session, user, application_id)
