"""Profile operations.

Profiles stand in for the identity records of the hosted auth service: the
hub only needs a user id, a display name and an email.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codeprep.hub.db.tables import Profile
from codeprep.hub.models.api import ProfileCreate


class DuplicateProfileError(ValueError):
    """Raised when a profile with the given ID or email already exists."""


class ProfileNotFoundError(LookupError):
    """Raised when a profile is not found."""


async def create_profile(db: AsyncSession, body: ProfileCreate) -> Profile:
    """Create a profile.  Raises ``DuplicateProfileError`` on ID or email clash."""
    profile_id = body.id or str(uuid.uuid4())

    if await db.get(Profile, profile_id) is not None:
        raise DuplicateProfileError(profile_id)
    clash = await db.execute(select(Profile.id).where(Profile.email == body.email))
    if clash.scalar_one_or_none() is not None:
        raise DuplicateProfileError(body.email)

    profile = Profile(id=profile_id, name=body.name, email=body.email, avatar_url=body.avatar_url)
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def get_profile(db: AsyncSession, profile_id: str) -> Profile:
    """Get a profile by ID.  Raises ``ProfileNotFoundError`` if missing."""
    profile = await db.get(Profile, profile_id)
    if profile is None:
        raise ProfileNotFoundError(profile_id)
    return profile
