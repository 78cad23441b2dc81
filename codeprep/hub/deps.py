"""FastAPI dependency injection for DB sessions, identity and editors.

Usage in route handlers::

    @router.post("/things")
    async def create_thing(db: DbSession, user: CurrentUser, thing: ThingCreate) -> ThingResponse:
        ...

``get_db`` raises HTTP 503 if the database was not configured
(CODEPREP_DATABASE_URL unset).  ``get_current_user`` raises HTTP 401 when
the service token is wrong or the ``X-User-Id`` header does not name a
known profile.
"""

from __future__ import annotations

import secrets
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from codeprep.hub.context import UserContext
from codeprep.hub.db.tables import Profile
from codeprep.hub.execution.adapter import ExecutionAdapter
from codeprep.hub.registry import WorkspaceRegistry


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield an async SQLAlchemy session, closing it after the request.

    Managers commit on success.  If the handler raises, the session is simply
    closed and the implicit transaction is rolled back by the connection pool.
    """
    session_factory = request.app.state.db_session_factory
    if session_factory is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not configured (CODEPREP_DATABASE_URL is unset).",
        )
    session: AsyncSession = session_factory()
    try:
        yield session
    finally:
        await session.close()


def verify_token(request: Request, authorization: str | None = Header(default=None)) -> None:
    """Check the service bearer token when one is configured."""
    expected: str | None = getattr(request.app.state, "auth_token", None)
    if expected is None:
        return
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not secrets.compare_digest(token, expected):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing bearer token.")


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    _token: Annotated[None, Depends(verify_token)],
    x_user_id: str | None = Header(default=None),
) -> UserContext:
    """Resolve the acting user from the ``X-User-Id`` header."""
    if not x_user_id:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header.")
    profile = await db.get(Profile, x_user_id)
    if profile is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=f"Unknown user '{x_user_id}'.")
    return UserContext.from_profile(profile)


def get_registry(request: Request) -> WorkspaceRegistry:
    return request.app.state.workspace_registry


def get_adapter(request: Request) -> ExecutionAdapter:
    return request.app.state.execution_adapter


# -- Annotated type aliases for concise route signatures ---------------------

DbSession = Annotated[AsyncSession, Depends(get_db)]
"""Annotated dependency: async SQLAlchemy session (auto-closed after request)."""

CurrentUser = Annotated[UserContext, Depends(get_current_user)]
"""Annotated dependency: the authenticated user."""

ServiceToken = Annotated[None, Depends(verify_token)]
"""Annotated dependency: bearer token check only (no user required)."""

Editors = Annotated[WorkspaceRegistry, Depends(get_registry)]
"""Annotated dependency: the process-wide editor registry."""

Executor = Annotated[ExecutionAdapter, Depends(get_adapter)]
"""Annotated dependency: the execution adapter."""
