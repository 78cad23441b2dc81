"""Fixtures for API tests: an httpx client wired to a fresh database and registry."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from codeprep.hub.app import app
from codeprep.hub.db.engine import create_session_factory
from codeprep.hub.execution.adapter import ExecutionAdapter
from codeprep.hub.registry import WorkspaceRegistry

Headers = dict[str, str]


@pytest.fixture
async def client(async_engine: AsyncEngine) -> AsyncIterator[httpx.AsyncClient]:
    """Async client against the app with per-test state.

    The ASGI transport does not run the lifespan, so the state it would set
    is installed here instead.
    """
    app.state.db_engine = async_engine
    app.state.db_session_factory = create_session_factory(async_engine)
    app.state.auth_token = None
    app.state.workspace_registry = WorkspaceRegistry()
    app.state.execution_adapter = ExecutionAdapter()

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.state.workspace_registry.clear()
    app.state.db_session_factory = None
    app.state.db_engine = None


@pytest.fixture
def make_user(client: httpx.AsyncClient) -> Callable[[str], Awaitable[Headers]]:
    """Factory: register a profile and return the headers that act as it."""

    async def _make(user_id: str) -> Headers:
        resp = await client.post(
            "/api/profiles/create",
            json={"id": user_id, "name": user_id.capitalize(), "email": f"{user_id}@example.com"},
        )
        assert resp.status_code == 201, resp.text
        return {"X-User-Id": user_id}

    return _make


@pytest.fixture
async def alice(make_user: Callable[[str], Awaitable[Headers]]) -> Headers:
    return await make_user("alice")


@pytest.fixture
async def bob(make_user: Callable[[str], Awaitable[Headers]]) -> Headers:
    return await make_user("bob")
