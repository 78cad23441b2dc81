"""Folder CRUD operations.

Folders form a per-user tree.  A parent can only be chosen at creation time
and must already exist, so the tree can never contain a cycle.  Deleting a
folder removes its programs and its whole subtree.
"""

from __future__ import annotations

import uuid

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from codeprep.hub.db.tables import Folder, Program
from codeprep.hub.managers.activities import record_activity
from codeprep.hub.models.api import FolderCreate, FolderUpdate
from codeprep.hub.models.enums import ActivityAction, TargetType


class FolderNotFoundError(LookupError):
    """Raised when a folder is not found (or is not owned by the caller)."""


async def create_folder(db: AsyncSession, user_id: str, body: FolderCreate) -> Folder:
    """Create a folder, optionally nested under an existing folder of the same user."""
    if body.parent_id is not None:
        await get_folder(db, user_id, body.parent_id)

    folder = Folder(id=str(uuid.uuid4()), name=body.name, user_id=user_id, parent_id=body.parent_id)
    db.add(folder)
    await db.commit()
    await db.refresh(folder)

    await record_activity(
        db,
        user_id=user_id,
        action=ActivityAction.CREATED,
        target_type=TargetType.FOLDER,
        target_id=folder.id,
        target_name=folder.name,
    )
    return folder


async def list_folders(db: AsyncSession, user_id: str) -> list[Folder]:
    """All folders of a user, ordered by name."""
    result = await db.execute(select(Folder).where(Folder.user_id == user_id).order_by(Folder.name))
    return list(result.scalars().all())


async def get_folder(db: AsyncSession, user_id: str, folder_id: str) -> Folder:
    """Get a folder owned by *user_id*.  Raises ``FolderNotFoundError`` otherwise."""
    folder = await db.get(Folder, folder_id)
    if folder is None or folder.user_id != user_id:
        raise FolderNotFoundError(folder_id)
    return folder


async def rename_folder(db: AsyncSession, user_id: str, folder_id: str, body: FolderUpdate) -> Folder:
    folder = await get_folder(db, user_id, folder_id)

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return folder

    folder.name = changes["name"]
    await db.commit()
    await db.refresh(folder)
    return folder


async def delete_folder(db: AsyncSession, user_id: str, folder_id: str) -> list[str]:
    """Delete a folder, its descendant folders and every program inside them.

    Returns the IDs of the deleted programs so callers can release any editor
    that had one of them open.
    """
    await get_folder(db, user_id, folder_id)

    subtree = await _collect_subtree(db, user_id, folder_id)

    result = await db.execute(select(Program.id).where(Program.folder_id.in_(subtree)))
    program_ids = list(result.scalars().all())

    await db.execute(delete(Program).where(Program.folder_id.in_(subtree)))
    # Children first so parent_id references never dangle.
    for fid in reversed(subtree):
        await db.execute(delete(Folder).where(Folder.id == fid))
    await db.commit()

    logger.info("Folder deleted: {} ({} folders, {} programs)", folder_id, len(subtree), len(program_ids))
    return program_ids


async def _collect_subtree(db: AsyncSession, user_id: str, root_id: str) -> list[str]:
    """Breadth-first list of folder IDs under (and including) *root_id*."""
    result = await db.execute(select(Folder.id, Folder.parent_id).where(Folder.user_id == user_id))
    children: dict[str, list[str]] = {}
    for fid, parent_id in result.all():
        if parent_id is not None:
            children.setdefault(parent_id, []).append(fid)

    ordered = [root_id]
    index = 0
    while index < len(ordered):
        ordered.extend(children.get(ordered[index], []))
        index += 1
    return ordered
