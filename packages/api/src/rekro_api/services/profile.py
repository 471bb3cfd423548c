# This project was developed with assistance from AI tools.
"""Applicant profile service.

The user row and its intent record are created on first authenticated
access and then only ever updated in place.
"""

import logging

from rekro_db import ApplicationProfile, User
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.errors import NotFoundError, ValidationError
from ..schemas.auth import UserContext
from ..schemas.completeness import CompletenessReport
from ..schemas.profile import (
    DocumentRef,
    IntentFields,
    PersonalFields,
    ProfileResponse,
    ProfileUpdate,
)
from . import completeness
from .access import require_user
from .documents import DocumentRegistry, parse_document_type
from .persistence import commit, utcnow

logger = logging.getLogger(__name__)

_PERSONAL_FIELDS = frozenset(PersonalFields.model_fields)
_INTENT_FIELDS = frozenset(IntentFields.model_fields)


async def load_user(session: AsyncSession, user_id: str) -> User | None:
    """Load a user with the intent record eagerly attached."""
    stmt = (
        select(User)
        .options(selectinload(User.application_profile))
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_or_create_profile(session: AsyncSession, user: UserContext | None) -> User:
    """Return the caller's profile, creating the user and intent rows if missing."""
    user = require_user(user)
    row = await load_user(session, user.user_id)
    if row is not None and row.application_profile is not None:
        return row

    if row is None:
        row = User(id=user.user_id, email=user.email, full_name=user.name or None)
        session.add(row)
        logger.info("Created profile for user=%s", user.user_id)
    session.add(ApplicationProfile(user_id=user.user_id, documents={}))
    await commit(session, "create profile")
    return await load_user(session, user.user_id)


async def _check_username_free(session: AsyncSession, username: str, user_id: str) -> None:
    stmt = select(User.id).where(User.username == username, User.id != user_id)
    if (await session.execute(stmt)).first() is not None:
        raise ValidationError(f"Username '{username}' is already taken")


async def update_profile(
    session: AsyncSession,
    user: UserContext | None,
    update: ProfileUpdate,
) -> User:
    """Write only the fields present in ``update``."""
    row = await get_or_create_profile(session, user)
    fields = update.model_dump(exclude_unset=True)
    if fields.get("discoverable", False) is None:
        del fields["discoverable"]
    if fields.get("username") is not None:
        await _check_username_free(session, fields["username"], row.id)

    now = utcnow()
    touched_intent = False
    for name, value in fields.items():
        if name in _PERSONAL_FIELDS:
            setattr(row, name, value)
        elif name in _INTENT_FIELDS:
            setattr(row.application_profile, name, value)
            touched_intent = True
    row.updated_at = now
    if touched_intent:
        row.application_profile.updated_at = now

    await commit(session, "update profile")
    logger.info("Updated profile user=%s fields=%s", row.id, sorted(fields))
    return await load_user(session, row.id)


async def register_document(
    session: AsyncSession,
    user: UserContext | None,
    doc_type: str,
    ref: DocumentRef,
) -> User:
    row = await get_or_create_profile(session, user)
    doc_type = parse_document_type(doc_type)

    registry = DocumentRegistry(row.application_profile.documents)
    registry.register(doc_type, ref)
    row.application_profile.documents = registry.as_dict()
    row.application_profile.updated_at = utcnow()

    await commit(session, "register document")
    logger.info("Registered document type=%s user=%s", doc_type.value, row.id)
    return await load_user(session, row.id)


async def remove_document(session: AsyncSession, user: UserContext | None, doc_type: str) -> User:
    row = await get_or_create_profile(session, user)
    doc_type = parse_document_type(doc_type)

    registry = DocumentRegistry(row.application_profile.documents)
    if not registry.remove(doc_type):
        raise NotFoundError(f"No {doc_type.value} document registered")
    row.application_profile.documents = registry.as_dict()
    row.application_profile.updated_at = utcnow()

    await commit(session, "remove document")
    logger.info("Removed document type=%s user=%s", doc_type.value, row.id)
    return await load_user(session, row.id)


async def get_completion(session: AsyncSession, user: UserContext | None) -> CompletenessReport:
    row = await get_or_create_profile(session, user)
    return completeness.score_user(row)


def build_profile_response(row: User) -> ProfileResponse:
    intent = row.application_profile
    return ProfileResponse(
        id=row.id,
        email=row.email,
        **PersonalFields.model_validate(row).model_dump(),
        intent=IntentFields.model_validate(intent) if intent else IntentFields(),
        documents=DocumentRegistry(intent.documents if intent else None).refs(),
    )
