"""Integration tests for the editor workspace endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from codeprep.hub.execution.adapter import GROUP_SAVED_LINE, PERSONAL_SAVED_LINE
from codeprep.hub.models.enums import Language
from codeprep.hub.models.language import DEFAULT_CODE
from codeprep.hub.workspace import WELCOME_CODE


async def _open_editor(client: AsyncClient, headers: dict[str, str], group_id: str | None = None) -> str:
    resp = await client.post("/api/editors/create", json={"group_id": group_id}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["editor_id"]


async def _create_program(client: AsyncClient, headers: dict[str, str], **body) -> dict:
    resp = await client.post("/api/programs/create", json={"title": "Prog", **body}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.integration
async def test_new_editor_snapshot(client: AsyncClient, alice: dict[str, str]) -> None:
    resp = await client.post("/api/editors/create", json={}, headers=alice)
    assert resp.status_code == 201
    data = resp.json()
    assert data["user_id"] == "alice"
    assert data["active_program"] is None
    assert data["code"] == WELCOME_CODE
    assert data["language"] == "javascript"
    assert data["is_running"] is False
    assert data["notices"] == []


@pytest.mark.integration
async def test_editors_are_per_user(client: AsyncClient, alice: dict[str, str], bob: dict[str, str]) -> None:
    editor = await _open_editor(client, alice)
    assert (await client.get(f"/api/editors/{editor}/get", headers=bob)).status_code == 404
    assert [e["editor_id"] for e in (await client.get("/api/editors/list", headers=alice)).json()] == [editor]
    assert (await client.get("/api/editors/list", headers=bob)).json() == []


@pytest.mark.integration
async def test_run_save_flow(client: AsyncClient, alice: dict[str, str]) -> None:
    program = await _create_program(client, alice, language="python")
    editor = await _open_editor(client, alice)

    resp = await client.post(f"/api/editors/{editor}/select", json={"program_id": program["id"]}, headers=alice)
    snap = resp.json()
    assert snap["active_program"]["id"] == program["id"]
    assert snap["code"] == DEFAULT_CODE[Language.PYTHON]
    assert snap["language"] == "python"

    code = 'for n in range(2):\n    print("n =", n)'
    await client.post(f"/api/editors/{editor}/code", json={"code": code}, headers=alice)

    snap = (await client.post(f"/api/editors/{editor}/run", headers=alice)).json()
    assert snap["output"] == "n = 0\nn = 1"
    assert snap["error"] is None
    assert snap["is_running"] is False

    snap = (await client.post(f"/api/editors/{editor}/save", headers=alice)).json()
    assert [(n["level"], n["message"]) for n in snap["notices"]] == [("success", "Program saved")]
    assert snap["active_program"]["code"] == code

    stored = (await client.get(f"/api/programs/{program['id']}/get", headers=alice)).json()
    assert stored["code"] == code

    # Notices are delivered once
    assert (await client.get(f"/api/editors/{editor}/get", headers=alice)).json()["notices"] == []

    snap = (await client.post(f"/api/editors/{editor}/clear-output", headers=alice)).json()
    assert snap["output"] == ""


@pytest.mark.integration
async def test_run_error(client: AsyncClient, alice: dict[str, str]) -> None:
    editor = await _open_editor(client, alice)
    await client.post(f"/api/editors/{editor}/language", json={"language": "python"}, headers=alice)
    await client.post(f"/api/editors/{editor}/code", json={"code": "1 / 0"}, headers=alice)

    snap = (await client.post(f"/api/editors/{editor}/run", headers=alice)).json()
    assert snap["error"] == "division by zero"
    assert snap["output"] == "Error: division by zero"


@pytest.mark.integration
async def test_run_instructional(client: AsyncClient, alice: dict[str, str]) -> None:
    editor = await _open_editor(client, alice)
    snap = (await client.post(f"/api/editors/{editor}/language", json={"language": "java"}, headers=alice)).json()
    assert snap["code"] == DEFAULT_CODE[Language.JAVA]

    snap = (await client.post(f"/api/editors/{editor}/run", headers=alice)).json()
    assert snap["output"].startswith("Java execution requires a backend runtime.")
    assert snap["output"].endswith(PERSONAL_SAVED_LINE)
    assert snap["code"] == DEFAULT_CODE[Language.JAVA]

    group = (await client.post("/api/groups/create", json={"name": "G"}, headers=alice)).json()
    group_editor = await _open_editor(client, alice, group["id"])
    snap = (await client.post(f"/api/editors/{group_editor}/run", headers=alice)).json()
    assert snap["output"].startswith("JavaScript execution requires a backend runtime.")
    assert snap["output"].endswith(GROUP_SAVED_LINE)


@pytest.mark.integration
async def test_save_without_program_is_noop(client: AsyncClient, alice: dict[str, str]) -> None:
    editor = await _open_editor(client, alice)
    await client.post(f"/api/editors/{editor}/code", json={"code": "draft"}, headers=alice)

    snap = (await client.post(f"/api/editors/{editor}/save", headers=alice)).json()
    assert snap["notices"] == []
    assert snap["code"] == "draft"
    assert (await client.get("/api/activities/list", headers=alice)).json() == []


@pytest.mark.integration
async def test_clear_selection(client: AsyncClient, alice: dict[str, str]) -> None:
    program = await _create_program(client, alice, language="cpp")
    editor = await _open_editor(client, alice)
    await client.post(f"/api/editors/{editor}/select", json={"program_id": program["id"]}, headers=alice)

    snap = (await client.post(f"/api/editors/{editor}/clear-selection", headers=alice)).json()
    assert snap["active_program"] is None
    assert snap["language"] == "javascript"
    assert snap["code"] == DEFAULT_CODE[Language.JAVASCRIPT]


@pytest.mark.integration
async def test_select_respects_editor_scope(client: AsyncClient, alice: dict[str, str], bob: dict[str, str]) -> None:
    group = (await client.post("/api/groups/create", json={"name": "G"}, headers=alice)).json()
    personal = await _create_program(client, alice)
    shared = await _create_program(client, alice, group_id=group["id"])
    bobs = await _create_program(client, bob)

    personal_editor = await _open_editor(client, alice)
    group_editor = await _open_editor(client, alice, group["id"])

    async def select(editor: str, program_id: str) -> int:
        resp = await client.post(f"/api/editors/{editor}/select", json={"program_id": program_id}, headers=alice)
        return resp.status_code

    assert await select(personal_editor, personal["id"]) == 200
    assert await select(personal_editor, shared["id"]) == 404
    assert await select(personal_editor, bobs["id"]) == 404
    assert await select(group_editor, shared["id"]) == 200
    assert await select(group_editor, personal["id"]) == 404


@pytest.mark.integration
async def test_group_editor_requires_membership(
    client: AsyncClient, alice: dict[str, str], bob: dict[str, str]
) -> None:
    group = (await client.post("/api/groups/create", json={"name": "G"}, headers=alice)).json()
    resp = await client.post("/api/editors/create", json={"group_id": group["id"]}, headers=bob)
    assert resp.status_code == 403
    resp = await client.post("/api/editors/create", json={"group_id": "missing"}, headers=bob)
    assert resp.status_code == 404


@pytest.mark.integration
async def test_group_save_by_another_member(client: AsyncClient, alice: dict[str, str], bob: dict[str, str]) -> None:
    group = (await client.post("/api/groups/create", json={"name": "G"}, headers=alice)).json()
    await client.post("/api/groups/join", json={"invite_code": group["invite_code"]}, headers=bob)
    shared = await _create_program(client, alice, group_id=group["id"])

    editor = await _open_editor(client, bob, group["id"])
    await client.post(f"/api/editors/{editor}/select", json={"program_id": shared["id"]}, headers=bob)
    await client.post(f"/api/editors/{editor}/language", json={"language": "python"}, headers=bob)
    await client.post(f"/api/editors/{editor}/code", json={"code": "print('bob was here')"}, headers=bob)
    snap = (await client.post(f"/api/editors/{editor}/save", headers=bob)).json()
    assert snap["notices"][0]["level"] == "success"

    stored = (await client.get(f"/api/programs/{shared['id']}/get", headers=alice)).json()
    assert stored["code"] == "print('bob was here')"
    assert stored["language"] == "python"
    assert stored["user_id"] == "alice"


@pytest.mark.integration
async def test_delete_program_releases_editor(client: AsyncClient, alice: dict[str, str]) -> None:
    program = await _create_program(client, alice, language="python")
    editor = await _open_editor(client, alice)
    await client.post(f"/api/editors/{editor}/select", json={"program_id": program["id"]}, headers=alice)

    await client.post(f"/api/programs/{program['id']}/delete", headers=alice)

    snap = (await client.get(f"/api/editors/{editor}/get", headers=alice)).json()
    assert snap["active_program"] is None
    assert snap["code"] == DEFAULT_CODE[Language.JAVASCRIPT]


@pytest.mark.integration
async def test_close_editor(client: AsyncClient, alice: dict[str, str]) -> None:
    editor = await _open_editor(client, alice)
    assert (await client.post(f"/api/editors/{editor}/close", headers=alice)).status_code == 204
    assert (await client.get(f"/api/editors/{editor}/get", headers=alice)).status_code == 404
    assert (await client.post(f"/api/editors/{editor}/close", headers=alice)).status_code == 404
