"""Shared enumerations used across the hub."""

from __future__ import annotations

from enum import StrEnum

# -- Programs ----------------------------------------------------------------


class Language(StrEnum):
    """Closed set of languages a program can be written in."""

    JAVASCRIPT = "javascript"
    PYTHON = "python"
    JAVA = "java"
    CPP = "cpp"


# -- Groups ------------------------------------------------------------------


class MemberRole(StrEnum):
    ADMIN = "admin"
    MEMBER = "member"


# -- Activities --------------------------------------------------------------


class ActivityAction(StrEnum):
    CREATED = "created"
    EDITED = "edited"
    JOINED = "joined"
    REMOVED = "removed"


class TargetType(StrEnum):
    PROGRAM = "program"
    FOLDER = "folder"
    GROUP = "group"
    MEMBER = "member"


# -- Editor ------------------------------------------------------------------


class NoticeLevel(StrEnum):
    """Severity of a user-visible notification."""

    SUCCESS = "success"
    ERROR = "error"
