# This project was developed with assistance from AI tools.
"""Functional tests: application lifecycle over HTTP.

Covers create/update upsert, ownership, submit with snapshot, withdrawal,
reviewer status changes, and the problem-detail error shape.
"""

import pytest
import pytest_asyncio

from ..factories import complete_user
from .personas import (
    SARAH_USER_ID,
    applicant_michael,
    applicant_sarah,
    reviewer,
)

pytestmark = pytest.mark.functional


def _body(catalog, **overrides) -> dict:
    body = {
        "property_id": catalog.property_id,
        "unit_id": catalog.room_id,
        "application_type": "individual",
        "move_in_date": "2026-11-01",
        "rental_duration": 12,
        "proposed_rent": 420,
        "total_rent": 470,
        "inclusions": {"furniture": {"selected": True, "price": 30}},
        "occupancy_type": "single",
        "message": "Looking forward to it",
    }
    body.update(overrides)
    return body


@pytest_asyncio.fixture
async def seeded(db_session, catalog):
    db_session.add(complete_user(SARAH_USER_ID, "sarah@example.com"))
    await db_session.commit()
    return catalog


async def _create(client_factory, catalog) -> dict:
    async with client_factory(applicant_sarah()) as client:
        resp = await client.post("/api/applications/", json=_body(catalog))
    assert resp.status_code == 201
    return resp.json()


# ---------------------------------------------------------------------------
# Upsert
# ---------------------------------------------------------------------------


async def test_create_returns_201_submitted(client_factory, seeded):
    created = await _create(client_factory, seeded)

    assert created["status"] == "submitted"
    assert created["submitted_at"] is not None
    assert created["applicant_id"] == SARAH_USER_ID
    assert created["inclusions"]["furniture"] == {"selected": True, "price": 30.0}


async def test_update_returns_200(client_factory, seeded):
    created = await _create(client_factory, seeded)

    async with client_factory(applicant_sarah()) as client:
        resp = await client.post(
            "/api/applications/", json=_body(seeded, id=created["id"], rental_duration=6)
        )

    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]
    assert resp.json()["rental_duration"] == 6


async def test_missing_property_is_400_problem(client_factory, seeded):
    async with client_factory(applicant_sarah()) as client:
        resp = await client.post("/api/applications/", json=_body(seeded, property_id=None))

    assert resp.status_code == 400
    problem = resp.json()
    assert problem["title"] == "Bad Request"
    assert problem["status"] == 400
    assert "Missing required fields" in problem["detail"]
    assert problem["instance"] == "/api/applications/"


async def test_malformed_body_is_400(client_factory, seeded):
    async with client_factory(applicant_sarah()) as client:
        resp = await client.post("/api/applications/", json=_body(seeded, rental_duration=0))
    assert resp.status_code == 400


async def test_foreign_update_is_403(client_factory, seeded):
    created = await _create(client_factory, seeded)

    async with client_factory(applicant_michael()) as client:
        resp = await client.post(
            "/api/applications/", json=_body(seeded, id=created["id"], message="mine now")
        )
    assert resp.status_code == 403

    async with client_factory(applicant_sarah()) as client:
        resp = await client.get(f"/api/applications/{created['id']}")
    assert resp.json()["message"] == "Looking forward to it"


async def test_unauthenticated_is_401(client_factory, seeded):
    async with client_factory(None) as client:
        resp = await client.get("/api/applications/")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Missing authentication token"


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def test_get_missing_is_404(client_factory, seeded):
    async with client_factory(applicant_sarah()) as client:
        resp = await client.get("/api/applications/999")
    assert resp.status_code == 404


async def test_list_scoped_and_paginated(client_factory, seeded):
    await _create(client_factory, seeded)
    await _create(client_factory, seeded)

    async with client_factory(applicant_sarah()) as client:
        resp = await client.get("/api/applications/", params={"limit": 1})
    body = resp.json()
    assert body["pagination"] == {"total": 2, "offset": 0, "limit": 1, "has_more": True}
    assert len(body["data"]) == 1

    async with client_factory(applicant_michael()) as client:
        resp = await client.get("/api/applications/")
    assert resp.json()["pagination"]["total"] == 0


# ---------------------------------------------------------------------------
# Submit / withdraw
# ---------------------------------------------------------------------------


async def test_submit_returns_snapshot(client_factory, seeded):
    created = await _create(client_factory, seeded)

    async with client_factory(applicant_sarah()) as client:
        resp = await client.post(
            f"/api/applications/{created['id']}/submit", json={"note": "final"}
        )

    assert resp.status_code == 200
    body = resp.json()
    assert body["application"]["status"] == "submitted"
    assert body["snapshot"]["note"] == "final"
    assert body["snapshot"]["snapshot"]["lease"]["rentalDuration"] == 12


async def test_submit_without_body(client_factory, seeded):
    created = await _create(client_factory, seeded)
    async with client_factory(applicant_sarah()) as client:
        resp = await client.post(f"/api/applications/{created['id']}/submit")
    assert resp.status_code == 200
    assert resp.json()["snapshot"]["note"] is None


async def test_withdraw_flow(client_factory, seeded):
    created = await _create(client_factory, seeded)
    url = f"/api/applications/{created['id']}/withdraw"

    async with client_factory(applicant_sarah()) as client:
        unconfirmed = await client.post(url, json={})
        confirmed = await client.post(url, json={"confirm": True})
        again = await client.post(url, json={"confirm": True})

    assert unconfirmed.status_code == 400
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "withdrawn"
    assert again.status_code == 422


# ---------------------------------------------------------------------------
# Reviewer status changes
# ---------------------------------------------------------------------------


async def test_applicant_cannot_change_status(client_factory, seeded):
    created = await _create(client_factory, seeded)
    async with client_factory(applicant_sarah()) as client:
        resp = await client.patch(
            f"/api/applications/{created['id']}/status", json={"status": "approved"}
        )
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Insufficient permissions"


async def test_reviewer_moves_through_review(client_factory, seeded):
    created = await _create(client_factory, seeded)
    url = f"/api/applications/{created['id']}/status"

    async with client_factory(reviewer()) as client:
        review = await client.patch(url, json={"status": "under_review"})
        approve = await client.patch(url, json={"status": "approved"})
        reopen = await client.patch(url, json={"status": "under_review"})

    assert review.json()["status"] == "under_review"
    assert approve.json()["status"] == "approved"
    assert reopen.status_code == 422

    async with client_factory(applicant_sarah()) as client:
        edit = await client.post("/api/applications/", json=_body(seeded, id=created["id"]))
        withdraw = await client.post(
            f"/api/applications/{created['id']}/withdraw", json={"confirm": True}
        )
    assert edit.status_code == 422
    assert withdraw.status_code == 422
