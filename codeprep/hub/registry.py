"""In-process workspace registry.

Tracks open editor workspaces keyed by editor ID.  Ephemeral -- empty on
process restart; an editor's buffer is never persisted, only explicit saves
reach the database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from codeprep.hub.models.enums import Language
from codeprep.hub.workspace import WorkspaceState

if TYPE_CHECKING:
    from codeprep.hub.context import UserContext


class EditorNotFoundError(LookupError):
    """Raised when an editor does not exist or belongs to another user."""


class WorkspaceRegistry:
    """Registry of open editors.

    Each editor belongs to exactly one user; lookups by another user behave
    as if the editor did not exist.  A user holds at most
    *max_editors_per_user* editors (``None`` for no limit).  The registry
    relies on the service's single event loop: no locking is done.
    """

    def __init__(
        self,
        default_language: Language = Language.JAVASCRIPT,
        max_editors_per_user: int | None = 20,
    ) -> None:
        self._editors: dict[str, WorkspaceState] = {}
        self._default_language = default_language
        self._max_editors_per_user = max_editors_per_user

    # -- Mutation --------------------------------------------------------------

    def open(self, user: UserContext, *, group_id: str | None = None) -> WorkspaceState:
        """Open a fresh editor for *user*.

        When the user already holds ``max_editors_per_user`` editors, the
        oldest ones are closed first.
        """
        if self._max_editors_per_user is not None:
            owned = self.for_user(user.user_id)
            for stale in owned[: max(0, len(owned) - self._max_editors_per_user + 1)]:
                logger.bind(editor_id=stale.editor_id).info("Registry: closing oldest editor of {}", user.user_id)
                self.close(user.user_id, stale.editor_id)
        state = WorkspaceState(user=user, group_id=group_id, default_language=self._default_language)
        self._editors[state.editor_id] = state
        logger.bind(editor_id=state.editor_id).debug("Registry: opened (user={}, group={})", user.user_id, group_id)
        return state

    def close(self, user_id: str, editor_id: str) -> None:
        state = self.get(user_id, editor_id)
        state.unbind_user()
        del self._editors[editor_id]
        logger.bind(editor_id=editor_id).debug("Registry: closed")

    def clear(self) -> None:
        for state in self._editors.values():
            state.unbind_user()
        self._editors.clear()

    # -- Query -----------------------------------------------------------------

    def get(self, user_id: str, editor_id: str) -> WorkspaceState:
        """Raises ``EditorNotFoundError`` if missing or owned by someone else."""
        state = self._editors.get(editor_id)
        if state is None or state.user is None or state.user.user_id != user_id:
            raise EditorNotFoundError(editor_id)
        return state

    def for_user(self, user_id: str) -> list[WorkspaceState]:
        return [s for s in self._editors.values() if s.user is not None and s.user.user_id == user_id]

    @property
    def active_count(self) -> int:
        return len(self._editors)

    # -- Invalidation ----------------------------------------------------------

    def release_program(self, program_id: str) -> int:
        """Clear the selection of every editor showing a deleted program.

        Returns the number of editors that were reset.
        """
        count = 0
        for state in self._editors.values():
            if state.active_program is not None and state.active_program.id == program_id:
                state.clear_active_program()
                count += 1
        if count:
            logger.info("Registry: released program {} from {} editors", program_id, count)
        return count

    def release_group(self, group_id: str, user_id: str) -> int:
        """Close a user's editors for a group they no longer belong to."""
        stale = [
            s.editor_id
            for s in self._editors.values()
            if s.group_id == group_id and s.user is not None and s.user.user_id == user_id
        ]
        for editor_id in stale:
            self.close(user_id, editor_id)
        return len(stale)
