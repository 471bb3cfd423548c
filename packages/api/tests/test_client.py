# This project was developed with assistance from AI tools.
"""ApplicationsClient tests against an in-process mock transport."""

import json

import httpx
import pytest
from rekro_db.enums import ApplicationStatus

from rekro_api.client import ApplicationsClient
from rekro_api.core.errors import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    ServiceUnavailableError,
    ValidationError,
)

from .factories import upsert_payload

_APP = {
    "id": 41,
    "applicant_id": "sarah-mitchell-001",
    "property_id": 3,
    "unit_id": None,
    "application_type": "individual",
    "status": "submitted",
    "message": None,
    "move_in_date": "2026-11-01",
    "rental_duration": 12,
    "proposed_rent": "420.00",
    "total_rent": None,
    "inclusions": {"bills": {"selected": True, "price": 20}},
    "occupancy_type": "single",
    "created_at": "2026-10-18T09:00:00Z",
    "submitted_at": "2026-10-18T09:00:00Z",
    "updated_at": "2026-10-18T09:00:00Z",
}

_SNAPSHOT = {
    "id": 7,
    "application_id": 41,
    "snapshot": {"lease": {"rentalDuration": 12}},
    "created_by": "sarah-mitchell-001",
    "note": None,
    "created_at": "2026-10-18T09:00:01Z",
}


def _problem(status: int, detail: str) -> httpx.Response:
    return httpx.Response(status, json={"type": "about:blank", "status": status, "detail": detail})


def _client(handler, **kwargs) -> ApplicationsClient:
    return ApplicationsClient(
        "http://api.test", token="tok", transport=httpx.MockTransport(handler), **kwargs
    )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


async def test_upsert_posts_json_with_bearer_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json=_APP)

    async with _client(handler) as client:
        app = await client.upsert(upsert_payload(3))

    assert seen["method"] == "POST"
    assert seen["path"] == "/api/applications/"
    assert seen["auth"] == "Bearer tok"
    assert seen["body"]["move_in_date"] == "2026-11-01"
    assert seen["body"]["occupancy_type"] == "single"
    assert app.id == 41
    assert app.inclusions["bills"].price == 20


async def test_list_sends_status_filter():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["status"] == "under_review"
        return httpx.Response(
            200,
            json={
                "data": [_APP],
                "pagination": {"total": 1, "offset": 0, "limit": 20, "has_more": False},
            },
        )

    async with _client(handler) as client:
        page = await client.list_applications(status=ApplicationStatus.UNDER_REVIEW)

    assert page.pagination.total == 1


async def test_submit_returns_application_and_snapshot():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/applications/41/submit"
        assert json.loads(request.content) == {"note": "hi"}
        return httpx.Response(200, json={"application": _APP, "snapshot": _SNAPSHOT})

    async with _client(handler) as client:
        result = await client.submit(41, "hi")

    assert result.snapshot.snapshot["lease"]["rentalDuration"] == 12


async def test_withdraw_sends_confirmation():
    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content) == {"confirm": True}
        return httpx.Response(200, json={**_APP, "status": "withdrawn"})

    async with _client(handler) as client:
        app = await client.withdraw(41, confirm=True)

    assert app.status == ApplicationStatus.WITHDRAWN


async def test_latest_snapshot_null_is_none():
    async with _client(lambda request: httpx.Response(200, json=None)) as client:
        assert await client.latest_snapshot(41) is None


async def test_compare_passes_both_ids():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/applications/41/snapshots/compare"
        assert dict(request.url.params) == {"left": "7", "right": "8"}
        return httpx.Response(200, json={"left": _SNAPSHOT, "right": {**_SNAPSHOT, "id": 8}})

    async with _client(handler) as client:
        comparison = await client.compare_snapshots(41, 7, 8)

    assert (comparison.left.id, comparison.right.id) == (7, 8)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "status, error_cls",
    [
        (400, ValidationError),
        (403, AuthorizationError),
        (404, NotFoundError),
        (422, InvalidTransitionError),
        (500, PersistenceError),
    ],
)
async def test_problem_details_map_to_service_errors(status, error_cls):
    async with _client(lambda request: _problem(status, "nope")) as client:
        with pytest.raises(error_cls, match="nope"):
            await client.get(41)


async def test_unmapped_status_keeps_code():
    async with _client(lambda request: httpx.Response(409, text="conflict")) as client:
        with pytest.raises(ServiceError) as exc_info:
            await client.get(41)
    assert exc_info.value.status_code == 409


async def test_transport_failure_is_service_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(ServiceUnavailableError, match="unreachable"):
            await client.get(41)
