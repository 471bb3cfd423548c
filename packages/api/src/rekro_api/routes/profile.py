# This project was developed with assistance from AI tools.
"""Applicant profile, document registry, and completeness routes."""

from fastapi import APIRouter, Depends
from rekro_db import get_db
from rekro_db.enums import UserRole
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.completeness import CompletenessReport
from ..schemas.profile import DocumentRef, ProfileResponse, ProfileUpdate
from ..services import profile as profile_service

router = APIRouter(dependencies=[Depends(require_roles(UserRole.APPLICANT, UserRole.ADMIN))])


@router.get("/", response_model=ProfileResponse)
async def get_profile(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """Return the caller's profile, creating it on first access."""
    row = await profile_service.get_or_create_profile(session, user)
    return profile_service.build_profile_response(row)


@router.patch("/", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    row = await profile_service.update_profile(session, user, body)
    return profile_service.build_profile_response(row)


@router.get("/completion", response_model=CompletenessReport)
async def get_completion(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CompletenessReport:
    """Completeness computed from the persisted profile."""
    return await profile_service.get_completion(session, user)


@router.put("/documents/{doc_type}", response_model=ProfileResponse)
async def register_document(
    doc_type: str,
    body: DocumentRef,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    row = await profile_service.register_document(session, user, doc_type, body)
    return profile_service.build_profile_response(row)


@router.delete("/documents/{doc_type}", response_model=ProfileResponse)
async def remove_document(
    doc_type: str,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    row = await profile_service.remove_document(session, user, doc_type)
    return profile_service.build_profile_response(row)
