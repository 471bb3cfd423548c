# This project was developed with assistance from AI tools.
"""Application lifecycle routes with RBAC enforcement.

Service errors (validation, ownership, not-found, transition, persistence)
propagate to the RFC 7807 handler registered in ``main``.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from rekro_db import get_db
from rekro_db.enums import ApplicationStatus, UserRole
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas import Pagination
from ..schemas.application import (
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationUpsert,
    StatusUpdateRequest,
    SubmitRequest,
    SubmitResponse,
    WithdrawRequest,
)
from ..schemas.snapshot import SnapshotResponse
from ..services import application as app_service

router = APIRouter()

_ANY_ROLE = require_roles(UserRole.APPLICANT, UserRole.ADMIN)


@router.get(
    "/",
    response_model=ApplicationListResponse,
    dependencies=[Depends(_ANY_ROLE)],
)
async def list_applications(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    status_filter: ApplicationStatus | None = Query(default=None, alias="status"),
) -> ApplicationListResponse:
    """List the caller's applications (all applications for reviewers)."""
    applications, total = await app_service.list_applications(
        session, user, offset=offset, limit=limit, status=status_filter,
    )
    return ApplicationListResponse(
        data=[ApplicationResponse.model_validate(a) for a in applications],
        pagination=Pagination.build(total, offset, limit),
    )


@router.post(
    "/",
    response_model=ApplicationResponse,
    responses={201: {"description": "Application created"}},
    dependencies=[Depends(_ANY_ROLE)],
)
async def upsert_application(
    body: ApplicationUpsert,
    user: CurrentUser,
    response: Response,
    session: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """Create an application (no id, 201) or update the caller's own (200)."""
    application, created = await app_service.upsert_application(session, user, body)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ApplicationResponse.model_validate(application)


@router.get(
    "/{application_id}",
    response_model=ApplicationResponse,
    dependencies=[Depends(_ANY_ROLE)],
)
async def get_application(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    application = await app_service.get_application(session, user, application_id)
    return ApplicationResponse.model_validate(application)


@router.post(
    "/{application_id}/submit",
    response_model=SubmitResponse,
    dependencies=[Depends(_ANY_ROLE)],
)
async def submit_application(
    application_id: int,
    user: CurrentUser,
    body: SubmitRequest | None = None,
    session: AsyncSession = Depends(get_db),
) -> SubmitResponse:
    """Snapshot the current terms and profile and refresh submission time."""
    application, snapshot = await app_service.submit_application(
        session, user, application_id, note=body.note if body else None,
    )
    return SubmitResponse(
        application=ApplicationResponse.model_validate(application),
        snapshot=SnapshotResponse.model_validate(snapshot),
    )


@router.post(
    "/{application_id}/withdraw",
    response_model=ApplicationResponse,
    dependencies=[Depends(_ANY_ROLE)],
)
async def withdraw_application(
    application_id: int,
    body: WithdrawRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """Withdraw the caller's application. Requires ``{"confirm": true}``."""
    application = await app_service.withdraw_application(
        session, user, application_id, confirm=body.confirm,
    )
    return ApplicationResponse.model_validate(application)


@router.patch(
    "/{application_id}/status",
    response_model=ApplicationResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def update_status(
    application_id: int,
    body: StatusUpdateRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """Reviewer status change: under_review, approved, or rejected."""
    application = await app_service.transition_status(session, user, application_id, body.status)
    return ApplicationResponse.model_validate(application)
