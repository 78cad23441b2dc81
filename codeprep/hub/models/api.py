"""API request / response schemas for CRUD endpoints.

These thin schemas sit between HTTP and the ORM layer:

- **Create** schemas validate user input and provide defaults.
- **Update** schemas allow partial updates via ``exclude_unset``.
- **Response** schemas serialize ORM rows via ``from_attributes``.

Required names and titles are stripped and must be non-empty, so blank form
fields are rejected before any database access.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from codeprep.hub.models.enums import ActivityAction, Language, MemberRole

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


class ProfileCreate(BaseModel):
    """Input for registering a user profile."""

    id: str | None = Field(default=None, description="Optional; auto-generated UUID if omitted.")
    name: NonBlankStr
    email: NonBlankStr
    avatar_url: str | None = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    avatar_url: str | None = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Folder
# ---------------------------------------------------------------------------


class FolderCreate(BaseModel):
    """Input for creating a folder.  The parent must already exist."""

    name: NonBlankStr
    parent_id: str | None = None


class FolderUpdate(BaseModel):
    """Folders can only be renamed; re-parenting is not supported."""

    name: NonBlankStr | None = None


class FolderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    user_id: str
    parent_id: str | None = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Program
# ---------------------------------------------------------------------------


class ProgramCreate(BaseModel):
    """Input for creating a program.

    Setting ``group_id`` creates a group-shared program; otherwise the program
    is personal.  ``code`` defaults to the language's starter snippet.
    """

    title: NonBlankStr
    language: Language = Language.JAVASCRIPT
    code: str | None = None
    folder_id: str | None = None
    group_id: str | None = None


class ProgramUpdate(BaseModel):
    """Partial program update (metadata only; code goes through the editor)."""

    title: NonBlankStr | None = None
    folder_id: str | None = None


class ProgramResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    language: Language
    code: str
    folder_id: str | None = None
    user_id: str
    group_id: str | None = None
    is_group_program: bool
    created_at: datetime
    updated_at: datetime


class GroupProgramResponse(ProgramResponse):
    """Group program with its author's display name."""

    author_name: str | None = None


# ---------------------------------------------------------------------------
# Group
# ---------------------------------------------------------------------------


class GroupCreate(BaseModel):
    name: NonBlankStr
    description: str | None = None


class JoinGroupRequest(BaseModel):
    invite_code: NonBlankStr


class GroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    invite_code: str
    created_by: str
    created_at: datetime


class MemberResponse(BaseModel):
    """Membership row joined with the member's profile."""

    id: str
    user_id: str
    group_id: str
    role: MemberRole
    joined_at: datetime
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None


# ---------------------------------------------------------------------------
# Activity / dashboard
# ---------------------------------------------------------------------------


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    action: ActivityAction
    target_type: str
    target_id: str | None = None
    target_name: str | None = None
    group_id: str | None = None
    created_at: datetime


class DashboardResponse(BaseModel):
    total_programs: int
    total_groups: int
    total_folders: int
    recent_activities: list[ActivityResponse]


# ---------------------------------------------------------------------------
# Editor
# ---------------------------------------------------------------------------


class EditorCreate(BaseModel):
    """Open a new editor, optionally inside a group workspace."""

    group_id: str | None = None


class SelectProgramRequest(BaseModel):
    program_id: str


class SetCodeRequest(BaseModel):
    code: str


class SetLanguageRequest(BaseModel):
    language: Language
