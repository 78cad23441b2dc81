"""Program CRUD endpoints (RPC-style).

Code edits do not go through ``/update``: they are made in an editor and
written back with ``/editors/{id}/save``.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from codeprep.hub.db.tables import Program
from codeprep.hub.deps import CurrentUser, DbSession, Editors
from codeprep.hub.managers import programs as programs_mgr
from codeprep.hub.managers.folders import FolderNotFoundError
from codeprep.hub.managers.groups import GroupNotFoundError, NotGroupMemberError
from codeprep.hub.models.api import ProgramCreate, ProgramResponse, ProgramUpdate

router = APIRouter(prefix="/programs", tags=["programs"])


def _not_found(program_id: str) -> HTTPException:
    return HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Program '{program_id}' not found.")


@router.post("/create", response_model=ProgramResponse, status_code=status.HTTP_201_CREATED)
async def create_program(body: ProgramCreate, db: DbSession, user: CurrentUser) -> Program:
    """Create a personal program, or a group program when ``group_id`` is set."""
    try:
        return await programs_mgr.create_program(db, user.user_id, body)
    except FolderNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Folder '{exc}' not found.") from None
    except GroupNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Group '{exc}' not found.") from None
    except NotGroupMemberError as exc:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail=f"Not a member of group '{exc}'.") from None


@router.get("/list", response_model=list[ProgramResponse])
async def list_programs(
    db: DbSession,
    user: CurrentUser,
    folder_id: str | None = Query(None, description="Only programs in this folder."),
) -> list[Program]:
    """List the caller's personal programs, ordered by title."""
    return await programs_mgr.list_personal_programs(db, user.user_id, folder_id=folder_id)


@router.get("/{program_id}/get", response_model=ProgramResponse)
async def get_program(program_id: str, db: DbSession, user: CurrentUser) -> Program:
    try:
        return await programs_mgr.get_visible_program(db, user.user_id, program_id)
    except programs_mgr.ProgramNotFoundError:
        raise _not_found(program_id) from None


@router.post("/{program_id}/update", response_model=ProgramResponse)
async def update_program(program_id: str, body: ProgramUpdate, db: DbSession, user: CurrentUser) -> Program:
    """Rename a program or move it to another folder."""
    try:
        return await programs_mgr.update_program(db, user.user_id, program_id, body)
    except programs_mgr.ProgramNotFoundError:
        raise _not_found(program_id) from None
    except FolderNotFoundError as exc:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Folder '{exc}' not found.") from None
    except programs_mgr.ProgramAccessError as exc:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail=str(exc)) from None


@router.post("/{program_id}/delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_program(program_id: str, db: DbSession, user: CurrentUser, editors: Editors) -> None:
    """Delete a program; editors showing it fall back to an empty buffer."""
    try:
        await programs_mgr.delete_program(db, user.user_id, program_id)
    except programs_mgr.ProgramNotFoundError:
        raise _not_found(program_id) from None
    except programs_mgr.ProgramAccessError as exc:
        raise HTTPException(status.HTTP_403_FORBIDDEN, detail=str(exc)) from None
    editors.release_program(program_id)
