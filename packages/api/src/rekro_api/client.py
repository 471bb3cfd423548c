# This project was developed with assistance from AI tools.
"""Async HTTP client for the applications API.

Problem-detail responses are mapped back onto the service error taxonomy so
callers handle remote and in-process failures the same way. Transport
failures (including timeouts) raise ServiceUnavailableError and are safe to
retry.
"""

import logging
from typing import Any

import httpx
from rekro_db.enums import ApplicationStatus

from .core.config import settings
from .core.errors import ERRORS_BY_STATUS, ServiceError, ServiceUnavailableError
from .schemas.application import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationUpsert,
    SubmitResponse,
)
from .schemas.snapshot import SnapshotComparison, SnapshotListResponse, SnapshotResponse

logger = logging.getLogger(__name__)


def _error_from_response(response: httpx.Response) -> ServiceError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    detail = body.get("detail") if isinstance(body, dict) else None
    message = detail or response.reason_phrase or f"HTTP {response.status_code}"

    error_cls = ERRORS_BY_STATUS.get(response.status_code)
    if error_cls is None:
        error = ServiceError(message)
        error.status_code = response.status_code
        return error
    return error_cls(message)


class ApplicationsClient:
    """Thin wrapper over the application and snapshot endpoints.

    Usage:
        async with ApplicationsClient(token=access_token) as client:
            app = await client.upsert(payload)
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            headers=headers,
            timeout=timeout if timeout is not None else settings.API_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "ApplicationsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ServiceUnavailableError(f"Applications API unreachable: {exc}") from exc

        if response.is_error:
            raise _error_from_response(response)
        return response.json()

    # -- applications ------------------------------------------------------

    async def upsert(self, payload: ApplicationUpsert) -> ApplicationResponse:
        data = await self._request(
            "POST", "/api/applications/", json=payload.model_dump(mode="json")
        )
        return ApplicationResponse.model_validate(data)

    async def get(self, application_id: int) -> ApplicationResponse:
        data = await self._request("GET", f"/api/applications/{application_id}")
        return ApplicationResponse.model_validate(data)

    async def list_applications(
        self,
        *,
        offset: int = 0,
        limit: int = 20,
        status: ApplicationStatus | None = None,
    ) -> ApplicationListResponse:
        params: dict[str, Any] = {"offset": offset, "limit": limit}
        if status is not None:
            params["status"] = ApplicationStatus(status).value
        data = await self._request("GET", "/api/applications/", params=params)
        return ApplicationListResponse.model_validate(data)

    async def submit(self, application_id: int, note: str | None = None) -> SubmitResponse:
        data = await self._request(
            "POST", f"/api/applications/{application_id}/submit", json={"note": note}
        )
        return SubmitResponse.model_validate(data)

    async def withdraw(self, application_id: int, *, confirm: bool) -> ApplicationResponse:
        data = await self._request(
            "POST", f"/api/applications/{application_id}/withdraw", json={"confirm": confirm}
        )
        return ApplicationResponse.model_validate(data)

    async def update_status(
        self, application_id: int, status: ApplicationStatus
    ) -> ApplicationResponse:
        data = await self._request(
            "PATCH",
            f"/api/applications/{application_id}/status",
            json={"status": ApplicationStatus(status).value},
        )
        return ApplicationResponse.model_validate(data)

    # -- snapshots ---------------------------------------------------------

    async def create_snapshot(self, application_id: int, note: str | None = None) -> SnapshotResponse:
        data = await self._request(
            "POST", f"/api/applications/{application_id}/snapshots", json={"note": note}
        )
        return SnapshotResponse.model_validate(data)

    async def list_snapshots(
        self, application_id: int, *, offset: int = 0, limit: int = 20
    ) -> SnapshotListResponse:
        data = await self._request(
            "GET",
            f"/api/applications/{application_id}/snapshots",
            params={"offset": offset, "limit": limit},
        )
        return SnapshotListResponse.model_validate(data)

    async def latest_snapshot(self, application_id: int) -> SnapshotResponse | None:
        data = await self._request("GET", f"/api/applications/{application_id}/snapshots/latest")
        return SnapshotResponse.model_validate(data) if data is not None else None

    async def get_snapshot(self, application_id: int, snapshot_id: int) -> SnapshotResponse:
        data = await self._request(
            "GET", f"/api/applications/{application_id}/snapshots/{snapshot_id}"
        )
        return SnapshotResponse.model_validate(data)

    async def compare_snapshots(
        self, application_id: int, left: int, right: int
    ) -> SnapshotComparison:
        data = await self._request(
            "GET",
            f"/api/applications/{application_id}/snapshots/compare",
            params={"left": left, "right": right},
        )
        return SnapshotComparison.model_validate(data)
