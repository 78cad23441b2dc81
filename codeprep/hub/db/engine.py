"""Async SQLAlchemy engine and session factory.

Production runs on PostgreSQL through psycopg3 (``postgresql+psycopg://``).
A ``sqlite+aiosqlite://`` URL also works, for local development and tests;
SQLite gets no connection pool sizing and has foreign keys switched on per
connection.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

POOL_DEFAULTS: dict[str, Any] = {
    "pool_size": 5,
    "max_overflow": 10,
    "pool_pre_ping": True,
    "pool_recycle": 3600,
}


def create_engine(database_url: str, **kwargs: Any) -> AsyncEngine:
    """Create the service engine.  *kwargs* override the defaults."""
    is_sqlite = make_url(database_url).get_backend_name() == "sqlite"
    options: dict[str, Any] = {"echo": False}
    if not is_sqlite:
        options.update(POOL_DEFAULTS)
    options.update(kwargs)

    engine = create_async_engine(database_url, **options)
    if is_sqlite:
        event.listen(engine.sync_engine, "connect", _sqlite_foreign_keys)
    return engine


def _sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions keep ORM objects loaded after commit (``expire_on_commit=False``).

    Async code cannot lazy-load expired attributes, and managers return rows
    after committing them.
    """
    return async_sessionmaker(engine, expire_on_commit=False)
