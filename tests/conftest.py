"""Shared test fixtures: an in-memory database per test.

Each test function gets a fresh in-memory SQLite database (aiosqlite) built
with the service's own ``create_engine`` (foreign keys on) and the schema
created from ``Base.metadata``, so tests never see each other's rows.  Tests
that need the database should be marked with ``@pytest.mark.integration``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.pool import StaticPool

from codeprep.hub.db.engine import create_engine
from codeprep.hub.db.tables import Base


@pytest.fixture
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """Function-scoped async engine over a private in-memory database."""
    engine = create_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Async SQLAlchemy session configured like the service's session factory."""
    session = AsyncSession(bind=async_engine, expire_on_commit=False)
    yield session
    await session.close()
