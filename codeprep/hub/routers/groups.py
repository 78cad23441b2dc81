"""Group and membership endpoints (RPC-style).

All write operations use POST; reads use GET.  Every group-scoped endpoint
requires the caller to be a member of the group.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from codeprep.hub.db.tables import Activity, Group
from codeprep.hub.deps import CurrentUser, DbSession, Editors
from codeprep.hub.managers import activities as activities_mgr
from codeprep.hub.managers import groups as groups_mgr
from codeprep.hub.managers import programs as programs_mgr
from codeprep.hub.models.api import (
    ActivityResponse,
    GroupCreate,
    GroupProgramResponse,
    GroupResponse,
    JoinGroupRequest,
    MemberResponse,
    ProgramResponse,
)

router = APIRouter(prefix="/groups", tags=["groups"])


def _http_error(exc: Exception, group_id: str) -> HTTPException:
    """Translate a groups-manager exception into an HTTP error."""
    if isinstance(exc, groups_mgr.GroupNotFoundError):
        return HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Group '{group_id}' not found.")
    if isinstance(exc, groups_mgr.MemberNotFoundError):
        return HTTPException(status.HTTP_404_NOT_FOUND, detail=f"Member '{exc}' not found in group.")
    if isinstance(exc, groups_mgr.NotGroupAdminError):
        return HTTPException(status.HTTP_403_FORBIDDEN, detail="Only group admins can do that.")
    if isinstance(exc, groups_mgr.NotGroupMemberError):
        return HTTPException(status.HTTP_403_FORBIDDEN, detail=f"Not a member of group '{group_id}'.")
    return HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("/create", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(body: GroupCreate, db: DbSession, user: CurrentUser) -> Group:
    """Create a group; the caller becomes its admin."""
    try:
        return await groups_mgr.create_group(db, user.user_id, body)
    except groups_mgr.InviteCodeUnavailableError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from None


@router.get("/list", response_model=list[GroupResponse])
async def list_groups(db: DbSession, user: CurrentUser) -> list[Group]:
    """List the groups the caller belongs to."""
    return await groups_mgr.list_groups_for_user(db, user.user_id)


@router.post("/join", response_model=GroupResponse)
async def join_group(body: JoinGroupRequest, db: DbSession, user: CurrentUser) -> Group:
    """Join a group by invite code."""
    try:
        return await groups_mgr.join_group(db, user.user_id, body.invite_code)
    except groups_mgr.InvalidInviteCodeError:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Invalid invite code.") from None
    except groups_mgr.AlreadyMemberError:
        raise HTTPException(status.HTTP_409_CONFLICT, detail="You are already a member of this group.") from None


@router.get("/{group_id}/get", response_model=GroupResponse)
async def get_group(group_id: str, db: DbSession, user: CurrentUser) -> Group:
    try:
        return await groups_mgr.get_group(db, user.user_id, group_id)
    except (LookupError, PermissionError) as exc:
        raise _http_error(exc, group_id) from None


@router.get("/{group_id}/members", response_model=list[MemberResponse])
async def list_members(group_id: str, db: DbSession, user: CurrentUser) -> list[MemberResponse]:
    try:
        rows = await groups_mgr.list_members(db, user.user_id, group_id)
    except (LookupError, PermissionError) as exc:
        raise _http_error(exc, group_id) from None

    return [
        MemberResponse(
            id=member.id,
            user_id=member.user_id,
            group_id=member.group_id,
            role=member.role,
            joined_at=member.joined_at,
            name=profile.name if profile else None,
            email=profile.email if profile else None,
            avatar_url=profile.avatar_url if profile else None,
        )
        for member, profile in rows
    ]


@router.get("/{group_id}/programs", response_model=list[GroupProgramResponse])
async def list_group_programs(group_id: str, db: DbSession, user: CurrentUser) -> list[GroupProgramResponse]:
    """Shared programs of the group, most recently updated first."""
    try:
        rows = await programs_mgr.list_group_programs(db, user.user_id, group_id)
    except (LookupError, PermissionError) as exc:
        raise _http_error(exc, group_id) from None

    return [
        GroupProgramResponse(**ProgramResponse.model_validate(program).model_dump(), author_name=author)
        for program, author in rows
    ]


@router.get("/{group_id}/activities", response_model=list[ActivityResponse])
async def list_group_activities(
    group_id: str,
    db: DbSession,
    user: CurrentUser,
    limit: int = Query(50, ge=1, le=200),
) -> list[Activity]:
    try:
        await groups_mgr.require_membership(db, user.user_id, group_id)
    except (LookupError, PermissionError) as exc:
        raise _http_error(exc, group_id) from None
    return await activities_mgr.list_group_activities(db, group_id, limit=limit)


@router.post("/{group_id}/leave", status_code=status.HTTP_204_NO_CONTENT)
async def leave_group(group_id: str, db: DbSession, user: CurrentUser, editors: Editors) -> None:
    """Leave a group; the caller's editors in that group are closed."""
    try:
        await groups_mgr.leave_group(db, user.user_id, group_id)
    except (LookupError, PermissionError) as exc:
        raise _http_error(exc, group_id) from None
    editors.release_group(group_id, user.user_id)


@router.post("/{group_id}/members/{member_user_id}/remove", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    group_id: str,
    member_user_id: str,
    db: DbSession,
    user: CurrentUser,
    editors: Editors,
) -> None:
    """Admin-only: remove a member from the group."""
    try:
        await groups_mgr.remove_member(db, user.user_id, group_id, member_user_id)
    except (LookupError, PermissionError, ValueError) as exc:
        raise _http_error(exc, group_id) from None
    editors.release_group(group_id, member_user_id)
