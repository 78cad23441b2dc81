"""Alembic environment for the hub schema.

The URL comes from ``CODEPREP_DATABASE_URL``.  The service itself talks to
the database through an async driver; migrations run synchronously, so the
async driver name in the URL is swapped for its sync counterpart first.
"""

from __future__ import annotations

from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import make_url

from codeprep.hub.db.tables import Base
from codeprep.hub.settings import CodePrepSettings

# Async driver -> driver Alembic can use synchronously.
SYNC_DRIVERS = {
    "postgresql+asyncpg": "postgresql+psycopg",
    "postgresql+psycopg_async": "postgresql+psycopg",
    "sqlite+aiosqlite": "sqlite",
}

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def sync_url() -> str:
    """The configured database URL with a synchronous driver."""
    raw = CodePrepSettings().database_url
    if not raw:
        msg = "CODEPREP_DATABASE_URL is not set; nothing to migrate."
        raise RuntimeError(msg)
    url = make_url(raw)
    driver = SYNC_DRIVERS.get(url.drivername)
    if driver is not None:
        url = url.set(drivername=driver)
    return url.render_as_string(hide_password=False)


def include_object(obj: Any, name: str | None, type_: str, reflected: bool, compare_to: Any) -> bool:
    """Leave tables that only exist in the database alone during autogenerate."""
    return not (type_ == "table" and reflected and compare_to is None)


def _configure(**kwargs: Any) -> None:
    context.configure(
        target_metadata=target_metadata,
        include_object=include_object,
        compare_type=True,
        compare_server_default=True,
        **kwargs,
    )


if context.is_offline_mode():
    _configure(url=sync_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = create_engine(sync_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()
