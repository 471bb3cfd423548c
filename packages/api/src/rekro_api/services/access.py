# This project was developed with assistance from AI tools.
"""Ownership checks for application-scoped resources.

Unlike list queries, single-resource lookups distinguish "does not exist"
(NotFoundError) from "exists but belongs to someone else"
(AuthorizationError). Reviewers may read any application.
"""

import logging

from rekro_db import Application
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import AuthenticationRequiredError, AuthorizationError, NotFoundError
from ..schemas.auth import UserContext

logger = logging.getLogger(__name__)


def require_user(user: UserContext | None) -> UserContext:
    if user is None:
        raise AuthenticationRequiredError()
    return user


async def load_application(
    session: AsyncSession,
    user: UserContext | None,
    application_id: int,
    *,
    allow_reviewer: bool = True,
) -> Application:
    """Load an application the caller may act on, or raise."""
    user = require_user(user)

    stmt = (
        select(Application)
        .where(Application.id == application_id)
        .execution_options(populate_existing=True)
    )
    application = (await session.execute(stmt)).scalar_one_or_none()
    if application is None:
        raise NotFoundError(f"Application {application_id} not found")

    if application.applicant_id == user.user_id:
        return application
    if allow_reviewer and user.is_reviewer:
        return application

    logger.warning(
        "Access denied: user=%s attempted application=%s owned by %s",
        user.user_id,
        application_id,
        application.applicant_id,
    )
    raise AuthorizationError("You do not have access to this application")
