"""Folder CRUD endpoints (RPC-style).

All write operations use POST; reads use GET.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from codeprep.hub.db.tables import Folder
from codeprep.hub.deps import CurrentUser, DbSession, Editors
from codeprep.hub.managers import folders as folders_mgr
from codeprep.hub.models.api import FolderCreate, FolderResponse, FolderUpdate

router = APIRouter(prefix="/folders", tags=["folders"])


def _not_found(folder_id: str) -> HTTPException:
    return HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Folder '{folder_id}' not found.")


@router.post("/create", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(body: FolderCreate, db: DbSession, user: CurrentUser) -> Folder:
    """Create a folder, optionally under an existing parent folder."""
    try:
        return await folders_mgr.create_folder(db, user.user_id, body)
    except folders_mgr.FolderNotFoundError as exc:
        raise _not_found(str(exc)) from None


@router.get("/list", response_model=list[FolderResponse])
async def list_folders(db: DbSession, user: CurrentUser) -> list[Folder]:
    """List the caller's folders, ordered by name."""
    return await folders_mgr.list_folders(db, user.user_id)


@router.get("/{folder_id}/get", response_model=FolderResponse)
async def get_folder(folder_id: str, db: DbSession, user: CurrentUser) -> Folder:
    try:
        return await folders_mgr.get_folder(db, user.user_id, folder_id)
    except folders_mgr.FolderNotFoundError:
        raise _not_found(folder_id) from None


@router.post("/{folder_id}/update", response_model=FolderResponse)
async def update_folder(folder_id: str, body: FolderUpdate, db: DbSession, user: CurrentUser) -> Folder:
    """Rename a folder."""
    try:
        return await folders_mgr.rename_folder(db, user.user_id, folder_id, body)
    except folders_mgr.FolderNotFoundError:
        raise _not_found(folder_id) from None


@router.post("/{folder_id}/delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_folder(folder_id: str, db: DbSession, user: CurrentUser, editors: Editors) -> None:
    """Delete a folder with its subfolders and programs."""
    try:
        program_ids = await folders_mgr.delete_folder(db, user.user_id, folder_id)
    except folders_mgr.FolderNotFoundError:
        raise _not_found(folder_id) from None

    for program_id in program_ids:
        editors.release_program(program_id)
