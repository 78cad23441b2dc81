"""Dashboard and activity feed endpoints (read-only)."""

from __future__ import annotations

from fastapi import APIRouter, Query

from codeprep.hub.db.tables import Activity
from codeprep.hub.deps import CurrentUser, DbSession
from codeprep.hub.managers import activities as activities_mgr
from codeprep.hub.models.api import ActivityResponse, DashboardResponse

router = APIRouter(tags=["activities"])


@router.get("/dashboard/get", response_model=DashboardResponse)
async def get_dashboard(db: DbSession, user: CurrentUser) -> DashboardResponse:
    """Program, group and folder counts plus the ten most recent activities."""
    dashboard = await activities_mgr.get_dashboard(db, user.user_id)
    return DashboardResponse(
        total_programs=dashboard.total_programs,
        total_groups=dashboard.total_groups,
        total_folders=dashboard.total_folders,
        recent_activities=[ActivityResponse.model_validate(a) for a in dashboard.recent_activities],
    )


@router.get("/activities/list", response_model=list[ActivityResponse])
async def list_activities(
    db: DbSession,
    user: CurrentUser,
    limit: int = Query(10, ge=1, le=200),
) -> list[Activity]:
    """The caller's own activities, newest first."""
    return await activities_mgr.list_recent_activities(db, user.user_id, limit=limit)
