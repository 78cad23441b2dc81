"""Activity log and dashboard aggregation.

Activities are append-only: this module inserts and reads them, nothing in
the hub updates or deletes an activity row.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from codeprep.hub.db.tables import Activity, Folder, GroupMember, Program
from codeprep.hub.models.enums import ActivityAction, TargetType


async def record_activity(
    db: AsyncSession,
    *,
    user_id: str,
    action: ActivityAction,
    target_type: TargetType,
    target_id: str | None = None,
    target_name: str | None = None,
    group_id: str | None = None,
    commit: bool = True,
) -> Activity:
    """Append an activity row.

    Pass ``commit=False`` to add the row to a transaction the caller commits.
    """
    activity = Activity(
        id=str(uuid.uuid4()),
        user_id=user_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        target_name=target_name,
        group_id=group_id,
    )
    db.add(activity)
    if commit:
        await db.commit()
    return activity


async def list_recent_activities(db: AsyncSession, user_id: str, *, limit: int = 10) -> list[Activity]:
    """The user's own activities, newest first."""
    stmt = (
        select(Activity)
        .where(Activity.user_id == user_id)
        .order_by(Activity.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_group_activities(db: AsyncSession, group_id: str, *, limit: int = 50) -> list[Activity]:
    """Activities recorded in a group context, newest first."""
    stmt = (
        select(Activity)
        .where(Activity.group_id == group_id)
        .order_by(Activity.created_at.desc())
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


# -- Dashboard -----------------------------------------------------------------


@dataclass
class Dashboard:
    total_programs: int
    total_groups: int
    total_folders: int
    recent_activities: list[Activity]


async def get_dashboard(db: AsyncSession, user_id: str) -> Dashboard:
    """Counts of personal programs, group memberships and folders, plus recent activity."""
    programs = await db.scalar(
        select(func.count())
        .select_from(Program)
        .where(Program.user_id == user_id, Program.is_group_program.is_(False))
    )
    groups = await db.scalar(select(func.count()).select_from(GroupMember).where(GroupMember.user_id == user_id))
    folders = await db.scalar(select(func.count()).select_from(Folder).where(Folder.user_id == user_id))

    return Dashboard(
        total_programs=programs or 0,
        total_groups=groups or 0,
        total_folders=folders or 0,
        recent_activities=await list_recent_activities(db, user_id),
    )
