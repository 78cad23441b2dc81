"""Program CRUD operations and the visibility rule.

A personal program (``is_group_program=False``) is visible and writable only
by its owner.  A group program is visible and writable by every member of
its group, regardless of which member created it.
"""

from __future__ import annotations

import uuid

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from codeprep.hub.db.tables import Profile, Program
from codeprep.hub.managers.activities import record_activity
from codeprep.hub.managers.folders import get_folder
from codeprep.hub.managers.groups import get_membership, require_membership
from codeprep.hub.models.api import ProgramCreate, ProgramUpdate
from codeprep.hub.models.enums import ActivityAction, Language, TargetType
from codeprep.hub.models.language import default_code


class ProgramNotFoundError(LookupError):
    """Raised when a program is not found or not visible to the caller."""


class ProgramAccessError(PermissionError):
    """Raised when the caller may see a program but not perform the operation."""


async def create_program(db: AsyncSession, user_id: str, body: ProgramCreate) -> Program:
    """Create a personal or group program, seeded with the language's starter snippet."""
    if body.group_id is not None:
        await require_membership(db, user_id, body.group_id)
        folder_id = None
    else:
        folder_id = body.folder_id
        if folder_id is not None:
            await get_folder(db, user_id, folder_id)

    program = Program(
        id=str(uuid.uuid4()),
        title=body.title,
        language=body.language,
        code=body.code if body.code is not None else default_code(body.language),
        folder_id=folder_id,
        user_id=user_id,
        group_id=body.group_id,
        is_group_program=body.group_id is not None,
    )
    db.add(program)
    await db.commit()
    await db.refresh(program)

    await record_activity(
        db,
        user_id=user_id,
        action=ActivityAction.CREATED,
        target_type=TargetType.PROGRAM,
        target_id=program.id,
        target_name=program.title,
        group_id=program.group_id,
    )
    return program


async def list_personal_programs(
    db: AsyncSession,
    user_id: str,
    *,
    folder_id: str | None = None,
) -> list[Program]:
    """The user's personal programs ordered by title, optionally within one folder."""
    stmt = select(Program).where(Program.user_id == user_id, Program.is_group_program.is_(False))
    if folder_id is not None:
        stmt = stmt.where(Program.folder_id == folder_id)
    result = await db.execute(stmt.order_by(Program.title))
    return list(result.scalars().all())


async def list_group_programs(db: AsyncSession, user_id: str, group_id: str) -> list[tuple[Program, str | None]]:
    """Shared programs of a group with author names, most recently updated first."""
    await require_membership(db, user_id, group_id)
    stmt = (
        select(Program, Profile.name)
        .outerjoin(Profile, Profile.id == Program.user_id)
        .where(Program.group_id == group_id, Program.is_group_program.is_(True))
        .order_by(Program.updated_at.desc(), Program.title)
    )
    result = await db.execute(stmt)
    return [(program, author) for program, author in result.all()]


async def can_access(db: AsyncSession, user_id: str, program: Program) -> bool:
    if program.is_group_program:
        if program.group_id is None:
            return False
        return await get_membership(db, user_id, program.group_id) is not None
    return program.user_id == user_id


async def get_visible_program(db: AsyncSession, user_id: str, program_id: str) -> Program:
    """Get a program the caller may see.  Raises ``ProgramNotFoundError`` otherwise."""
    program = await db.get(Program, program_id)
    if program is None or not await can_access(db, user_id, program):
        raise ProgramNotFoundError(program_id)
    return program


async def update_program(db: AsyncSession, user_id: str, program_id: str, body: ProgramUpdate) -> Program:
    """Rename a program or move a personal program between folders."""
    program = await get_visible_program(db, user_id, program_id)

    changes = body.model_dump(exclude_unset=True)
    if not changes:
        return program

    if "folder_id" in changes:
        if program.is_group_program:
            raise ProgramAccessError("Group programs cannot be placed in personal folders")
        if changes["folder_id"] is not None:
            await get_folder(db, user_id, changes["folder_id"])
    if changes.get("title") is None:
        changes.pop("title", None)

    for key, value in changes.items():
        setattr(program, key, value)

    await db.commit()
    await db.refresh(program)
    return program


async def save_program_code(
    db: AsyncSession,
    user_id: str,
    program_id: str,
    *,
    code: str,
    language: Language | None = None,
) -> Program:
    """Write an editor buffer back to a program and bump ``updated_at``.

    Concurrent saves are last-write-wins; no conflict detection is attempted.
    Raises ``ProgramNotFoundError`` if the row is gone and
    ``ProgramAccessError`` if the caller lost write access.
    """
    program = await db.get(Program, program_id)
    if program is None:
        raise ProgramNotFoundError(program_id)
    if not await can_access(db, user_id, program):
        raise ProgramAccessError(f"Not allowed to edit program '{program_id}'")

    program.code = code
    if language is not None:
        program.language = language
    program.updated_at = func.now()
    await db.commit()
    await db.refresh(program)
    return program


async def delete_program(db: AsyncSession, user_id: str, program_id: str) -> None:
    """Delete a program.  Group members can see a group program but only its author may delete it."""
    program = await get_visible_program(db, user_id, program_id)
    if program.user_id != user_id:
        raise ProgramAccessError(f"Only the author may delete program '{program_id}'")
    await db.delete(program)
    await db.commit()
    logger.info("Program deleted: {} by {}", program_id, user_id)
