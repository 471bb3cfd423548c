# This project was developed with assistance from AI tools.
"""Shared fixtures: an in-memory SQLite database per test plus seeded catalog.

Service-level tests run against a real async session so flush/commit,
rollback, and ORM events behave as they do in production.
"""

from collections import namedtuple

import pytest_asyncio
from rekro_db import Base
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from .factories import make_catalog

Catalog = namedtuple("Catalog", ["property_id", "room_id", "home_id", "other_property_id", "studio_id"])


@pytest_asyncio.fixture
async def async_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(async_engine):
    return async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def catalog(db_session) -> Catalog:
    house, other = make_catalog()
    db_session.add_all([house, other])
    await db_session.commit()
    room, home = house.units
    return Catalog(
        property_id=house.id,
        room_id=room.id,
        home_id=home.id,
        other_property_id=other.id,
        studio_id=other.units[0].id,
    )
