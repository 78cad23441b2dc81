"""Request-scoped user context.

Replaces an ambient "current user" store: the authenticated identity is
resolved once per request (see ``deps.get_current_user``) and handed
explicitly to whatever needs it -- managers take ``user.user_id``, editor
workspaces are bound to a ``UserContext`` when opened.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codeprep.hub.db.tables import Profile


@dataclass(frozen=True)
class UserContext:
    """The authenticated user behind a request."""

    user_id: str
    name: str
    email: str

    @classmethod
    def from_profile(cls, profile: Profile) -> UserContext:
        return cls(user_id=profile.id, name=profile.name, email=profile.email)
