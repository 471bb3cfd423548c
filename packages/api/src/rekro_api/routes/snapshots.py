# This project was developed with assistance from AI tools.
"""Application snapshot routes."""

from fastapi import APIRouter, Depends, Query, status
from rekro_db import get_db
from rekro_db.enums import UserRole
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas import Pagination
from ..schemas.snapshot import (
    SnapshotComparison,
    SnapshotCreateRequest,
    SnapshotListResponse,
    SnapshotResponse,
)
from ..services import snapshot as snapshot_service

router = APIRouter(dependencies=[Depends(require_roles(UserRole.APPLICANT, UserRole.ADMIN))])


@router.post(
    "/{application_id}/snapshots",
    response_model=SnapshotResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_snapshot(
    application_id: int,
    user: CurrentUser,
    body: SnapshotCreateRequest | None = None,
    session: AsyncSession = Depends(get_db),
) -> SnapshotResponse:
    snapshot = await snapshot_service.create_snapshot(
        session, user, application_id, note=body.note if body else None,
    )
    return SnapshotResponse.model_validate(snapshot)


@router.get("/{application_id}/snapshots", response_model=SnapshotListResponse)
async def list_snapshots(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> SnapshotListResponse:
    """Snapshots for an application, newest first."""
    snapshots, total = await snapshot_service.list_snapshots(
        session, user, application_id, offset=offset, limit=limit,
    )
    return SnapshotListResponse(
        data=[SnapshotResponse.model_validate(s) for s in snapshots],
        pagination=Pagination.build(total, offset, limit),
    )


# Static segments must be registered before /{snapshot_id}
@router.get("/{application_id}/snapshots/latest", response_model=SnapshotResponse | None)
async def latest_snapshot(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> SnapshotResponse | None:
    """Most recent snapshot, or null when none exists."""
    snapshot = await snapshot_service.get_latest_snapshot(session, user, application_id)
    return SnapshotResponse.model_validate(snapshot) if snapshot is not None else None


@router.get("/{application_id}/snapshots/compare", response_model=SnapshotComparison)
async def compare_snapshots(
    application_id: int,
    user: CurrentUser,
    left: int = Query(...),
    right: int = Query(...),
    session: AsyncSession = Depends(get_db),
) -> SnapshotComparison:
    left_snapshot, right_snapshot = await snapshot_service.compare_snapshots(
        session, user, application_id, left, right,
    )
    return SnapshotComparison(
        left=SnapshotResponse.model_validate(left_snapshot),
        right=SnapshotResponse.model_validate(right_snapshot),
    )


@router.get("/{application_id}/snapshots/{snapshot_id}", response_model=SnapshotResponse)
async def get_snapshot(
    application_id: int,
    snapshot_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> SnapshotResponse:
    snapshot = await snapshot_service.get_snapshot(session, user, application_id, snapshot_id)
    return SnapshotResponse.model_validate(snapshot)
