# This project was developed with assistance from AI tools.
"""Commit helpers shared by every mutating service call."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import PersistenceError

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


@asynccontextmanager
async def unit_of_work(session: AsyncSession, action: str) -> AsyncIterator[AsyncSession]:
    """Commit everything staged in the block, or roll it all back.

    Store failures (during the block or at commit) surface as
    PersistenceError carrying the store's own message.
    """
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as exc:
        logger.exception("Failed to %s; rolling back", action)
        await session.rollback()
        raise PersistenceError(str(exc)) from exc


async def commit(session: AsyncSession, action: str) -> None:
    async with unit_of_work(session, action):
        pass
