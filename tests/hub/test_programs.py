"""Integration tests for program CRUD endpoints and visibility."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from codeprep.hub.models.enums import Language
from codeprep.hub.models.language import DEFAULT_CODE


async def _create_group(client: AsyncClient, headers: dict[str, str], name: str = "Team") -> dict:
    resp = await client.post("/api/groups/create", json={"name": name}, headers=headers)
    assert resp.status_code == 201
    return resp.json()


@pytest.mark.integration
async def test_create_program_defaults(client: AsyncClient, alice: dict[str, str]) -> None:
    resp = await client.post("/api/programs/create", json={"title": "First"}, headers=alice)
    assert resp.status_code == 201
    data = resp.json()
    assert data["language"] == "javascript"
    assert data["code"] == DEFAULT_CODE[Language.JAVASCRIPT]
    assert data["is_group_program"] is False
    assert data["group_id"] is None
    assert data["user_id"] == "alice"


@pytest.mark.integration
async def test_create_program_language_snippet(client: AsyncClient, alice: dict[str, str]) -> None:
    resp = await client.post("/api/programs/create", json={"title": "Py", "language": "python"}, headers=alice)
    assert resp.json()["code"] == DEFAULT_CODE[Language.PYTHON]


@pytest.mark.integration
async def test_create_program_with_code(client: AsyncClient, alice: dict[str, str]) -> None:
    resp = await client.post(
        "/api/programs/create",
        json={"title": "Custom", "language": "python", "code": "print(42)"},
        headers=alice,
    )
    assert resp.json()["code"] == "print(42)"


@pytest.mark.integration
async def test_create_program_invalid_input(client: AsyncClient, alice: dict[str, str]) -> None:
    resp = await client.post("/api/programs/create", json={"title": "  "}, headers=alice)
    assert resp.status_code == 422
    resp = await client.post("/api/programs/create", json={"title": "X", "language": "rust"}, headers=alice)
    assert resp.status_code == 422


@pytest.mark.integration
async def test_list_programs_by_folder(client: AsyncClient, alice: dict[str, str]) -> None:
    folder = (await client.post("/api/folders/create", json={"name": "F"}, headers=alice)).json()["id"]
    await client.post("/api/programs/create", json={"title": "b", "folder_id": folder}, headers=alice)
    await client.post("/api/programs/create", json={"title": "a", "folder_id": folder}, headers=alice)
    await client.post("/api/programs/create", json={"title": "c"}, headers=alice)

    all_titles = [p["title"] for p in (await client.get("/api/programs/list", headers=alice)).json()]
    assert all_titles == ["a", "b", "c"]

    resp = await client.get("/api/programs/list", params={"folder_id": folder}, headers=alice)
    assert [p["title"] for p in resp.json()] == ["a", "b"]


@pytest.mark.integration
async def test_personal_programs_are_private(client: AsyncClient, alice: dict[str, str], bob: dict[str, str]) -> None:
    program_id = (await client.post("/api/programs/create", json={"title": "Mine"}, headers=alice)).json()["id"]

    assert (await client.get(f"/api/programs/{program_id}/get", headers=bob)).status_code == 404
    assert (await client.post(f"/api/programs/{program_id}/delete", headers=bob)).status_code == 404
    assert (await client.get("/api/programs/list", headers=bob)).json() == []


@pytest.mark.integration
async def test_group_program_visible_to_members(
    client: AsyncClient, alice: dict[str, str], bob: dict[str, str]
) -> None:
    group = await _create_group(client, alice)
    resp = await client.post(
        "/api/programs/create",
        json={"title": "Shared", "group_id": group["id"], "folder_id": "ignored"},
        headers=alice,
    )
    assert resp.status_code == 201
    program = resp.json()
    assert program["is_group_program"] is True
    assert program["folder_id"] is None

    # Not a member yet
    assert (await client.get(f"/api/programs/{program['id']}/get", headers=bob)).status_code == 404

    await client.post("/api/groups/join", json={"invite_code": group["invite_code"]}, headers=bob)
    assert (await client.get(f"/api/programs/{program['id']}/get", headers=bob)).status_code == 200

    # Group programs stay out of personal listings and counts
    assert (await client.get("/api/programs/list", headers=alice)).json() == []


@pytest.mark.integration
async def test_create_group_program_requires_membership(
    client: AsyncClient, alice: dict[str, str], bob: dict[str, str]
) -> None:
    group = await _create_group(client, alice)
    resp = await client.post("/api/programs/create", json={"title": "X", "group_id": group["id"]}, headers=bob)
    assert resp.status_code == 403

    resp = await client.post("/api/programs/create", json={"title": "X", "group_id": "missing"}, headers=bob)
    assert resp.status_code == 404


@pytest.mark.integration
async def test_update_program(client: AsyncClient, alice: dict[str, str]) -> None:
    folder = (await client.post("/api/folders/create", json={"name": "F"}, headers=alice)).json()["id"]
    program_id = (await client.post("/api/programs/create", json={"title": "Old"}, headers=alice)).json()["id"]

    resp = await client.post(
        f"/api/programs/{program_id}/update", json={"title": "New", "folder_id": folder}, headers=alice
    )
    assert resp.status_code == 200
    assert resp.json()["title"] == "New"
    assert resp.json()["folder_id"] == folder

    resp = await client.post(f"/api/programs/{program_id}/update", json={"folder_id": None}, headers=alice)
    assert resp.json()["folder_id"] is None
    assert resp.json()["title"] == "New"

    resp = await client.post(f"/api/programs/{program_id}/update", json={"folder_id": "nope"}, headers=alice)
    assert resp.status_code == 404


@pytest.mark.integration
async def test_group_program_cannot_move_to_folder(client: AsyncClient, alice: dict[str, str]) -> None:
    group = await _create_group(client, alice)
    folder = (await client.post("/api/folders/create", json={"name": "F"}, headers=alice)).json()["id"]
    program_id = (
        await client.post("/api/programs/create", json={"title": "G", "group_id": group["id"]}, headers=alice)
    ).json()["id"]

    resp = await client.post(f"/api/programs/{program_id}/update", json={"folder_id": folder}, headers=alice)
    assert resp.status_code == 403


@pytest.mark.integration
async def test_delete_program(client: AsyncClient, alice: dict[str, str]) -> None:
    program_id = (await client.post("/api/programs/create", json={"title": "Tmp"}, headers=alice)).json()["id"]

    resp = await client.post(f"/api/programs/{program_id}/delete", headers=alice)
    assert resp.status_code == 204
    assert (await client.get(f"/api/programs/{program_id}/get", headers=alice)).status_code == 404
    assert (await client.post(f"/api/programs/{program_id}/delete", headers=alice)).status_code == 404


@pytest.mark.integration
async def test_only_author_deletes_group_program(
    client: AsyncClient, alice: dict[str, str], bob: dict[str, str]
) -> None:
    group = await _create_group(client, alice)
    await client.post("/api/groups/join", json={"invite_code": group["invite_code"]}, headers=bob)
    resp = await client.post(
        "/api/programs/create", json={"title": "Shared", "group_id": group["id"]}, headers=alice
    )
    program_id = resp.json()["id"]

    resp = await client.post(f"/api/programs/{program_id}/delete", headers=bob)
    assert resp.status_code == 403
    assert (await client.get(f"/api/programs/{program_id}/get", headers=bob)).status_code == 200

    resp = await client.post(f"/api/programs/{program_id}/delete", headers=alice)
    assert resp.status_code == 204
