"""Data models for the hub."""

from codeprep.hub.models.api import (
    ActivityResponse,
    DashboardResponse,
    EditorCreate,
    FolderCreate,
    FolderResponse,
    FolderUpdate,
    GroupCreate,
    GroupProgramResponse,
    GroupResponse,
    JoinGroupRequest,
    MemberResponse,
    ProfileCreate,
    ProfileResponse,
    ProgramCreate,
    ProgramResponse,
    ProgramUpdate,
    SelectProgramRequest,
    SetCodeRequest,
    SetLanguageRequest,
)
from codeprep.hub.models.enums import ActivityAction, Language, MemberRole, NoticeLevel, TargetType
from codeprep.hub.models.language import DEFAULT_CODE, LANGUAGES, LanguageInfo
from codeprep.hub.models.program import ProgramIndex
from codeprep.hub.models.workspace import ExecutionResult, Notice, WorkspaceSnapshot

__all__ = [
    "DEFAULT_CODE",
    "LANGUAGES",
    # Enums
    "ActivityAction",
    # API schemas
    "ActivityResponse",
    "DashboardResponse",
    "EditorCreate",
    # Workspace
    "ExecutionResult",
    "FolderCreate",
    "FolderResponse",
    "FolderUpdate",
    "GroupCreate",
    "GroupProgramResponse",
    "GroupResponse",
    "JoinGroupRequest",
    "Language",
    "LanguageInfo",
    "MemberResponse",
    "MemberRole",
    "Notice",
    "NoticeLevel",
    "ProfileCreate",
    "ProfileResponse",
    "ProgramCreate",
    # Program
    "ProgramIndex",
    "ProgramResponse",
    "ProgramUpdate",
    "SelectProgramRequest",
    "SetCodeRequest",
    "SetLanguageRequest",
    "TargetType",
    "WorkspaceSnapshot",
]
