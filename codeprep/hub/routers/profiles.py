"""Profile endpoints (RPC-style).

Thin HTTP adapter -- delegates to the profiles manager.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from codeprep.hub.db.tables import Profile
from codeprep.hub.deps import CurrentUser, DbSession, ServiceToken
from codeprep.hub.managers import profiles as profiles_mgr
from codeprep.hub.models.api import ProfileCreate, ProfileResponse

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("/create", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(body: ProfileCreate, db: DbSession, _token: ServiceToken) -> Profile:
    """Register a user profile."""
    try:
        return await profiles_mgr.create_profile(db, body)
    except profiles_mgr.DuplicateProfileError as exc:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=f"Profile '{exc}' already exists.") from None


@router.get("/me", response_model=ProfileResponse)
async def get_me(db: DbSession, user: CurrentUser) -> Profile:
    """Return the caller's own profile."""
    return await profiles_mgr.get_profile(db, user.user_id)
