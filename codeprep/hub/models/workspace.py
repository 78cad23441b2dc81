"""Editor workspace models: notices, execution results and state snapshots."""

from __future__ import annotations

from pydantic import BaseModel, Field

from codeprep.hub.models.enums import Language, NoticeLevel
from codeprep.hub.models.program import ProgramIndex


class Notice(BaseModel):
    """A transient user-visible notification (a "toast")."""

    level: NoticeLevel
    message: str


class ExecutionResult(BaseModel):
    """Outcome of a single run.  ``output`` is what the output panel shows."""

    output: str
    is_error: bool = False
    error: str | None = None
    """The raw error message when ``is_error`` is set."""
    lines: list[str] = Field(default_factory=list, description="Captured output lines, in print order.")


class WorkspaceSnapshot(BaseModel):
    """Serializable view of one editor's state."""

    editor_id: str
    user_id: str | None = None
    group_id: str | None = None
    active_program: ProgramIndex | None = None
    code: str
    language: Language
    output: str = ""
    is_running: bool = False
    error: str | None = None
    notices: list[Notice] = Field(default_factory=list)
