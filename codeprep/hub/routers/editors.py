"""Editor workspace endpoints (RPC-style).

Each editor is a ``WorkspaceState`` held in the in-process registry.  Every
endpoint returns the editor's snapshot with the notices raised since the last
call, so a rejected save shows up as an error notice rather than an HTTP
error.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from codeprep.hub.deps import CurrentUser, DbSession, Editors, Executor
from codeprep.hub.managers import groups as groups_mgr
from codeprep.hub.managers import programs as programs_mgr
from codeprep.hub.models.api import EditorCreate, SelectProgramRequest, SetCodeRequest, SetLanguageRequest
from codeprep.hub.models.program import ProgramIndex
from codeprep.hub.models.workspace import WorkspaceSnapshot
from codeprep.hub.registry import EditorNotFoundError
from codeprep.hub.workspace import WorkspaceState

router = APIRouter(prefix="/editors", tags=["editors"])


def _editor(editors: Editors, user: CurrentUser, editor_id: str) -> WorkspaceState:
    try:
        return editors.get(user.user_id, editor_id)
    except EditorNotFoundError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Editor '{editor_id}' not found.") from None


@router.post("/create", response_model=WorkspaceSnapshot, status_code=status.HTTP_201_CREATED)
async def create_editor(body: EditorCreate, db: DbSession, user: CurrentUser, editors: Editors) -> WorkspaceSnapshot:
    """Open an editor, personal or scoped to a group the caller belongs to."""
    if body.group_id is not None:
        try:
            await groups_mgr.require_membership(db, user.user_id, body.group_id)
        except groups_mgr.GroupNotFoundError:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Group '{body.group_id}' not found.") from None
        except groups_mgr.NotGroupMemberError:
            raise HTTPException(status.HTTP_403_FORBIDDEN, detail=f"Not a member of group '{body.group_id}'.") from None
    return editors.open(user, group_id=body.group_id).snapshot()


@router.get("/list", response_model=list[WorkspaceSnapshot])
async def list_editors(user: CurrentUser, editors: Editors) -> list[WorkspaceSnapshot]:
    return [state.snapshot(drain=False) for state in editors.for_user(user.user_id)]


@router.get("/{editor_id}/get", response_model=WorkspaceSnapshot)
async def get_editor(editor_id: str, user: CurrentUser, editors: Editors) -> WorkspaceSnapshot:
    return _editor(editors, user, editor_id).snapshot()


@router.post("/{editor_id}/select", response_model=WorkspaceSnapshot)
async def select_program(
    editor_id: str,
    body: SelectProgramRequest,
    db: DbSession,
    user: CurrentUser,
    editors: Editors,
) -> WorkspaceSnapshot:
    """Open a program; the buffer is replaced by its stored code and language."""
    state = _editor(editors, user, editor_id)
    try:
        program = await programs_mgr.get_visible_program(db, user.user_id, body.program_id)
    except programs_mgr.ProgramNotFoundError:
        program = None

    # Group editors only show that group's programs; personal editors only personal ones.
    if program is None or program.group_id != state.group_id:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Program '{body.program_id}' not found.")

    state.select_program(ProgramIndex.model_validate(program))
    return state.snapshot()


@router.post("/{editor_id}/clear-selection", response_model=WorkspaceSnapshot)
async def clear_selection(editor_id: str, user: CurrentUser, editors: Editors) -> WorkspaceSnapshot:
    state = _editor(editors, user, editor_id)
    state.clear_active_program()
    return state.snapshot()


@router.post("/{editor_id}/code", response_model=WorkspaceSnapshot)
async def set_code(editor_id: str, body: SetCodeRequest, user: CurrentUser, editors: Editors) -> WorkspaceSnapshot:
    state = _editor(editors, user, editor_id)
    state.set_code(body.code)
    return state.snapshot()


@router.post("/{editor_id}/language", response_model=WorkspaceSnapshot)
async def set_language(
    editor_id: str,
    body: SetLanguageRequest,
    user: CurrentUser,
    editors: Editors,
) -> WorkspaceSnapshot:
    state = _editor(editors, user, editor_id)
    state.set_language(body.language)
    return state.snapshot()


@router.post("/{editor_id}/run", response_model=WorkspaceSnapshot)
async def run_code(editor_id: str, user: CurrentUser, editors: Editors, adapter: Executor) -> WorkspaceSnapshot:
    """Execute the buffer; output (or the error) lands in the snapshot."""
    state = _editor(editors, user, editor_id)
    await state.run(adapter)
    return state.snapshot()


@router.post("/{editor_id}/save", response_model=WorkspaceSnapshot)
async def save_program(editor_id: str, db: DbSession, user: CurrentUser, editors: Editors) -> WorkspaceSnapshot:
    """Write the buffer back to the active program.  A no-op without one."""
    state = _editor(editors, user, editor_id)
    await state.save(db)
    return state.snapshot()


@router.post("/{editor_id}/clear-output", response_model=WorkspaceSnapshot)
async def clear_output(editor_id: str, user: CurrentUser, editors: Editors) -> WorkspaceSnapshot:
    state = _editor(editors, user, editor_id)
    state.clear_output()
    return state.snapshot()


@router.post("/{editor_id}/close", status_code=status.HTTP_204_NO_CONTENT)
async def close_editor(editor_id: str, user: CurrentUser, editors: Editors) -> None:
    """Discard an editor and any unsaved edits in it."""
    try:
        editors.close(user.user_id, editor_id)
    except EditorNotFoundError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Editor '{editor_id}' not found.") from None
