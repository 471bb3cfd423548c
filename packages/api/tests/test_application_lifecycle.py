# This project was developed with assistance from AI tools.
"""Application lifecycle service tests against a real async session."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from rekro_db.enums import ApplicationStatus, OccupancyType
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rekro_api.core.config import settings
from rekro_api.core.errors import (
    AuthenticationRequiredError,
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from rekro_api.services.application import (
    get_application,
    list_applications,
    submit_application,
    transition_status,
    upsert_application,
    withdraw_application,
)
from rekro_api.services.snapshot import list_snapshots

from .factories import complete_user, upsert_payload
from .functional.personas import (
    MICHAEL_USER_ID,
    SARAH_USER_ID,
    applicant_michael,
    applicant_sarah,
    reviewer,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def sarah(db_session):
    db_session.add(complete_user(SARAH_USER_ID, "sarah@example.com"))
    await db_session.commit()
    return applicant_sarah()


@pytest_asyncio.fixture
async def sarah_app(db_session, catalog, sarah):
    application, _ = await upsert_application(
        db_session, sarah, upsert_payload(catalog.property_id, catalog.room_id)
    )
    return application


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


async def test_create_lands_as_submitted(db_session, catalog, sarah):
    application, created = await upsert_application(
        db_session, sarah, upsert_payload(catalog.property_id, catalog.room_id)
    )

    assert created is True
    assert application.status == ApplicationStatus.SUBMITTED
    assert application.submitted_at is not None
    assert application.applicant_id == SARAH_USER_ID
    assert application.inclusions["furniture"] == {"selected": True, "price": 30}


async def test_create_provisions_profile_for_new_applicant(db_session, catalog):
    application, created = await upsert_application(
        db_session, applicant_michael(), upsert_payload(catalog.property_id)
    )
    assert created is True
    assert application.applicant_id == MICHAEL_USER_ID


@pytest.mark.parametrize("missing", ["property_id", "application_type"])
async def test_create_requires_property_and_type(db_session, catalog, sarah, missing):
    payload = upsert_payload(catalog.property_id, **{missing: None})
    with pytest.raises(ValidationError, match="Missing required fields"):
        await upsert_application(db_session, sarah, payload)

    _, total = await list_applications(db_session, sarah)
    assert total == 0


async def test_unit_must_belong_to_property(db_session, catalog, sarah):
    payload = upsert_payload(catalog.property_id, catalog.studio_id)
    with pytest.raises(ValidationError, match="does not belong"):
        await upsert_application(db_session, sarah, payload)


async def test_unknown_property_is_rejected(db_session, catalog, sarah):
    with pytest.raises(ValidationError, match="does not exist"):
        await upsert_application(db_session, sarah, upsert_payload(9999))


async def test_malformed_inclusion_is_rejected(db_session, catalog, sarah):
    payload = upsert_payload(
        catalog.property_id, inclusions={"bills": {"selected": "yes", "price": 10}}
    )
    with pytest.raises(ValidationError, match="selected must be a boolean"):
        await upsert_application(db_session, sarah, payload)


async def test_anonymous_caller_is_rejected(db_session, catalog):
    with pytest.raises(AuthenticationRequiredError):
        await upsert_application(db_session, None, upsert_payload(catalog.property_id))


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


async def test_update_in_place(db_session, catalog, sarah, sarah_app):
    payload = upsert_payload(
        catalog.property_id,
        catalog.room_id,
        id=sarah_app.id,
        rental_duration=6,
        occupancy_type=OccupancyType.DUAL,
    )
    application, created = await upsert_application(db_session, sarah, payload)

    assert created is False
    assert application.id == sarah_app.id
    assert application.rental_duration == 6
    assert application.occupancy_type == OccupancyType.DUAL
    assert application.status == ApplicationStatus.SUBMITTED


async def test_update_allowed_while_under_review(db_session, catalog, sarah, sarah_app):
    await transition_status(db_session, reviewer(), sarah_app.id, ApplicationStatus.UNDER_REVIEW)

    payload = upsert_payload(catalog.property_id, id=sarah_app.id, message="Updated")
    application, _ = await upsert_application(db_session, sarah, payload)

    assert application.message == "Updated"
    assert application.status == ApplicationStatus.UNDER_REVIEW


async def test_update_of_foreign_application_writes_nothing(db_session, catalog, sarah_app):
    payload = upsert_payload(catalog.property_id, id=sarah_app.id, message="hijacked")

    with pytest.raises(AuthorizationError):
        await upsert_application(db_session, applicant_michael(), payload)

    stored = await get_application(db_session, applicant_sarah(), sarah_app.id)
    assert stored.message == "Looking forward to it"


async def test_update_of_missing_application(db_session, catalog, sarah):
    with pytest.raises(NotFoundError):
        await upsert_application(db_session, sarah, upsert_payload(catalog.property_id, id=404))


async def test_approved_application_is_locked(db_session, catalog, sarah, sarah_app):
    await transition_status(db_session, reviewer(), sarah_app.id, ApplicationStatus.APPROVED)

    payload = upsert_payload(catalog.property_id, id=sarah_app.id, rental_duration=3)
    with pytest.raises(InvalidTransitionError, match="can no longer be edited"):
        await upsert_application(db_session, sarah, payload)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def test_list_is_scoped_to_caller(db_session, catalog, sarah, sarah_app):
    await upsert_application(db_session, applicant_michael(), upsert_payload(catalog.property_id))

    mine, total = await list_applications(db_session, sarah)
    assert total == 1
    assert [a.id for a in mine] == [sarah_app.id]

    everything, total = await list_applications(db_session, reviewer())
    assert total == 2


async def test_list_most_recently_updated_first(db_session, catalog, sarah, sarah_app):
    second, _ = await upsert_application(db_session, sarah, upsert_payload(catalog.property_id))
    await upsert_application(
        db_session, sarah, upsert_payload(catalog.property_id, id=sarah_app.id, message="bump")
    )

    rows, _ = await list_applications(db_session, sarah)
    assert [a.id for a in rows] == [sarah_app.id, second.id]


async def test_list_filters_by_status(db_session, catalog, sarah, sarah_app):
    await upsert_application(db_session, sarah, upsert_payload(catalog.property_id))
    await withdraw_application(db_session, sarah, sarah_app.id, confirm=True)

    rows, total = await list_applications(db_session, sarah, status=ApplicationStatus.WITHDRAWN)
    assert total == 1
    assert rows[0].id == sarah_app.id


async def test_reviewer_can_read_any_application(db_session, sarah_app):
    application = await get_application(db_session, reviewer(), sarah_app.id)
    assert application.id == sarah_app.id


async def test_other_applicant_cannot_read(db_session, sarah_app):
    with pytest.raises(AuthorizationError):
        await get_application(db_session, applicant_michael(), sarah_app.id)


# ---------------------------------------------------------------------------
# Submit
# ---------------------------------------------------------------------------


async def test_submit_writes_snapshot_and_keeps_status(db_session, sarah, sarah_app):
    first_submitted = sarah_app.submitted_at

    application, snapshot = await submit_application(db_session, sarah, sarah_app.id, "v1")

    assert application.status == ApplicationStatus.SUBMITTED
    assert application.submitted_at >= first_submitted
    assert snapshot.application_id == sarah_app.id
    assert snapshot.note == "v1"
    assert snapshot.created_by == SARAH_USER_ID
    assert snapshot.snapshot["lease"]["rentalDuration"] == 12
    assert snapshot.snapshot["profile"]["fullName"] == "Sarah Mitchell"


async def test_snapshot_embeds_just_written_terms(db_session, catalog, sarah, sarah_app):
    await upsert_application(
        db_session, sarah, upsert_payload(catalog.property_id, id=sarah_app.id, rental_duration=9)
    )
    _, snapshot = await submit_application(db_session, sarah, sarah_app.id)
    assert snapshot.snapshot["lease"]["rentalDuration"] == 9


async def test_submit_requires_complete_profile(db_session, catalog):
    michael = applicant_michael()
    application, _ = await upsert_application(db_session, michael, upsert_payload(catalog.property_id))

    with pytest.raises(ValidationError, match="Complete your profile"):
        await submit_application(db_session, michael, application.id)

    _, total = await list_snapshots(db_session, michael, application.id)
    assert total == 0


async def test_submit_gate_can_be_disabled(db_session, catalog, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_COMPLETE_PROFILE", False)
    michael = applicant_michael()
    application, _ = await upsert_application(db_session, michael, upsert_payload(catalog.property_id))

    _, snapshot = await submit_application(db_session, michael, application.id)
    assert snapshot.snapshot["profile"]["fullName"] == "Michael Chen"


async def test_submit_by_reviewer_is_rejected(db_session, sarah_app):
    with pytest.raises(AuthorizationError):
        await submit_application(db_session, reviewer(), sarah_app.id)


async def test_submit_after_withdrawal_is_rejected(db_session, sarah, sarah_app):
    await withdraw_application(db_session, sarah, sarah_app.id, confirm=True)
    with pytest.raises(InvalidTransitionError):
        await submit_application(db_session, sarah, sarah_app.id)


async def test_submit_store_failure_leaves_nothing_behind(db_session, sarah, sarah_app, monkeypatch):
    before = sarah_app.submitted_at
    failing_commit = AsyncMock(side_effect=SQLAlchemyError("disk full"))
    monkeypatch.setattr(AsyncSession, "commit", failing_commit)

    with pytest.raises(PersistenceError, match="disk full"):
        await submit_application(db_session, sarah, sarah_app.id)

    monkeypatch.undo()
    _, total = await list_snapshots(db_session, sarah, sarah_app.id)
    assert total == 0
    stored = await get_application(db_session, sarah, sarah_app.id)
    assert stored.submitted_at == before


# ---------------------------------------------------------------------------
# Withdraw
# ---------------------------------------------------------------------------


async def test_withdraw_requires_confirmation(db_session, sarah, sarah_app):
    with pytest.raises(ValidationError, match="explicitly confirmed"):
        await withdraw_application(db_session, sarah, sarah_app.id)

    stored = await get_application(db_session, sarah, sarah_app.id)
    assert stored.status == ApplicationStatus.SUBMITTED


async def test_withdraw_is_irreversible(db_session, sarah, sarah_app):
    application = await withdraw_application(db_session, sarah, sarah_app.id, confirm=True)
    assert application.status == ApplicationStatus.WITHDRAWN

    with pytest.raises(InvalidTransitionError):
        await withdraw_application(db_session, sarah, sarah_app.id, confirm=True)
    with pytest.raises(InvalidTransitionError):
        await transition_status(db_session, reviewer(), sarah_app.id, ApplicationStatus.UNDER_REVIEW)


async def test_withdraw_from_approved_fails(db_session, sarah, sarah_app):
    await transition_status(db_session, reviewer(), sarah_app.id, ApplicationStatus.APPROVED)
    with pytest.raises(InvalidTransitionError):
        await withdraw_application(db_session, sarah, sarah_app.id, confirm=True)


async def test_withdraw_of_foreign_application(db_session, sarah_app):
    with pytest.raises(AuthorizationError):
        await withdraw_application(db_session, applicant_michael(), sarah_app.id, confirm=True)


# ---------------------------------------------------------------------------
# Reviewer transitions
# ---------------------------------------------------------------------------


class TestReviewerTransitions:
    async def test_review_then_approve(self, db_session, sarah_app):
        app = await transition_status(db_session, reviewer(), sarah_app.id, "under_review")
        assert app.status == ApplicationStatus.UNDER_REVIEW
        app = await transition_status(db_session, reviewer(), sarah_app.id, "approved")
        assert app.status == ApplicationStatus.APPROVED

    async def test_reject_directly_from_submitted(self, db_session, sarah_app):
        app = await transition_status(db_session, reviewer(), sarah_app.id, ApplicationStatus.REJECTED)
        assert app.status == ApplicationStatus.REJECTED

    async def test_terminal_status_cannot_change(self, db_session, sarah_app):
        await transition_status(db_session, reviewer(), sarah_app.id, ApplicationStatus.APPROVED)
        with pytest.raises(InvalidTransitionError, match="terminal status"):
            await transition_status(db_session, reviewer(), sarah_app.id, ApplicationStatus.REJECTED)

    @pytest.mark.parametrize(
        "target", [ApplicationStatus.WITHDRAWN, ApplicationStatus.DRAFT, ApplicationStatus.SUBMITTED]
    )
    async def test_reviewer_targets_are_restricted(self, db_session, sarah_app, target):
        with pytest.raises(InvalidTransitionError, match="Reviewers cannot set status"):
            await transition_status(db_session, reviewer(), sarah_app.id, target)

        stored = await get_application(db_session, reviewer(), sarah_app.id)
        assert stored.status == ApplicationStatus.SUBMITTED
