"""Group and membership operations.

Groups are joined with an invite code, an opaque token compared for exact
equality.  The creator is seeded as ``admin`` in the same transaction that
creates the group; only admins may remove other members.
"""

from __future__ import annotations

import secrets
import uuid

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from codeprep.hub.db.tables import Group, GroupMember, Profile
from codeprep.hub.managers.activities import record_activity
from codeprep.hub.models.api import GroupCreate
from codeprep.hub.models.enums import ActivityAction, MemberRole, TargetType


class GroupNotFoundError(LookupError):
    """Raised when a group is not found."""


class InvalidInviteCodeError(LookupError):
    """Raised when no group matches an invite code."""


class AlreadyMemberError(ValueError):
    """Raised when a user joins a group they already belong to."""


class MemberNotFoundError(LookupError):
    """Raised when a membership row is not found."""


class NotGroupMemberError(PermissionError):
    """Raised when a non-member accesses a group."""


class NotGroupAdminError(PermissionError):
    """Raised when a non-admin attempts an admin-only action."""


class CannotRemoveSelfError(ValueError):
    """Raised when an admin tries to remove their own membership."""


class InviteCodeUnavailableError(RuntimeError):
    """Raised when every generated invite code collided with an existing one."""


INVITE_CODE_ATTEMPTS = 5


def generate_invite_code() -> str:
    return secrets.token_hex(4)


async def create_group(db: AsyncSession, user_id: str, body: GroupCreate) -> Group:
    """Create a group and seed its creator as admin.

    A taken invite code is replaced by a fresh one, up to
    ``INVITE_CODE_ATTEMPTS`` times.
    """
    for attempt in range(1, INVITE_CODE_ATTEMPTS + 1):
        group = Group(
            id=str(uuid.uuid4()),
            name=body.name,
            description=(body.description or "").strip() or None,
            invite_code=generate_invite_code(),
            created_by=user_id,
        )
        db.add(group)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.warning("Invite code collision creating group (attempt {}/{})", attempt, INVITE_CODE_ATTEMPTS)
            continue
        break
    else:
        raise InviteCodeUnavailableError(f"No free invite code after {INVITE_CODE_ATTEMPTS} attempts")

    db.add(GroupMember(id=str(uuid.uuid4()), user_id=user_id, group_id=group.id, role=MemberRole.ADMIN))
    await record_activity(
        db,
        user_id=user_id,
        action=ActivityAction.CREATED,
        target_type=TargetType.GROUP,
        target_id=group.id,
        target_name=group.name,
        group_id=group.id,
        commit=False,
    )
    await db.commit()
    await db.refresh(group)

    logger.info("Group created: {} by {}", group.id, user_id)
    return group


async def list_groups_for_user(db: AsyncSession, user_id: str) -> list[Group]:
    """Groups the user is a member of, ordered by name."""
    stmt = (
        select(Group)
        .join(GroupMember, GroupMember.group_id == Group.id)
        .where(GroupMember.user_id == user_id)
        .order_by(Group.name)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_membership(db: AsyncSession, user_id: str, group_id: str) -> GroupMember | None:
    result = await db.execute(
        select(GroupMember).where(GroupMember.user_id == user_id, GroupMember.group_id == group_id)
    )
    return result.scalar_one_or_none()


async def require_membership(db: AsyncSession, user_id: str, group_id: str) -> GroupMember:
    """Return the caller's membership row.

    Raises ``GroupNotFoundError`` for an unknown group and
    ``NotGroupMemberError`` if the user does not belong to it.
    """
    if await db.get(Group, group_id) is None:
        raise GroupNotFoundError(group_id)
    member = await get_membership(db, user_id, group_id)
    if member is None:
        raise NotGroupMemberError(group_id)
    return member


async def get_group(db: AsyncSession, user_id: str, group_id: str) -> Group:
    """Get a group the caller belongs to."""
    await require_membership(db, user_id, group_id)
    return await db.get(Group, group_id)  # type: ignore[return-value]


async def join_group(db: AsyncSession, user_id: str, invite_code: str) -> Group:
    """Join the group whose invite code matches exactly."""
    result = await db.execute(select(Group).where(Group.invite_code == invite_code.strip()))
    group = result.scalar_one_or_none()
    if group is None:
        raise InvalidInviteCodeError(invite_code)

    if await get_membership(db, user_id, group.id) is not None:
        raise AlreadyMemberError(group.id)

    db.add(GroupMember(id=str(uuid.uuid4()), user_id=user_id, group_id=group.id, role=MemberRole.MEMBER))
    await record_activity(
        db,
        user_id=user_id,
        action=ActivityAction.JOINED,
        target_type=TargetType.GROUP,
        target_id=group.id,
        target_name=group.name,
        group_id=group.id,
        commit=False,
    )
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race against a concurrent join of the same user.
        await db.rollback()
        raise AlreadyMemberError(group.id) from None

    logger.info("User {} joined group {}", user_id, group.id)
    return group


async def list_members(db: AsyncSession, user_id: str, group_id: str) -> list[tuple[GroupMember, Profile | None]]:
    """Members of a group with their profiles, admins first then by join time."""
    await require_membership(db, user_id, group_id)
    stmt = (
        select(GroupMember, Profile)
        .outerjoin(Profile, Profile.id == GroupMember.user_id)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.role.asc(), GroupMember.joined_at.asc())
    )
    result = await db.execute(stmt)
    return [(member, profile) for member, profile in result.all()]


async def leave_group(db: AsyncSession, user_id: str, group_id: str) -> None:
    """Remove the caller's own membership."""
    await require_membership(db, user_id, group_id)
    await db.execute(delete(GroupMember).where(GroupMember.group_id == group_id, GroupMember.user_id == user_id))
    await db.commit()
    logger.info("User {} left group {}", user_id, group_id)


async def remove_member(db: AsyncSession, user_id: str, group_id: str, member_user_id: str) -> None:
    """Admin-only: remove another member from the group."""
    caller = await require_membership(db, user_id, group_id)
    if caller.role != MemberRole.ADMIN:
        raise NotGroupAdminError(group_id)
    if member_user_id == user_id:
        raise CannotRemoveSelfError("Admins cannot remove themselves; leave the group instead.")

    target = await get_membership(db, member_user_id, group_id)
    if target is None:
        raise MemberNotFoundError(member_user_id)

    profile = await db.get(Profile, member_user_id)
    await db.delete(target)
    await record_activity(
        db,
        user_id=user_id,
        action=ActivityAction.REMOVED,
        target_type=TargetType.MEMBER,
        target_id=member_user_id,
        target_name=profile.name if profile else None,
        group_id=group_id,
        commit=False,
    )
    await db.commit()
    logger.info("User {} removed {} from group {}", user_id, member_user_id, group_id)
