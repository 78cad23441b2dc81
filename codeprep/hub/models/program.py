"""Program domain model.

A ``ProgramIndex`` is the immutable snapshot of a persisted program row that
the editor state holds as its active program.  It is detached from the ORM
session so it can outlive the request that loaded it.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from codeprep.hub.models.enums import Language


class ProgramIndex(BaseModel):
    """Program row (PG)."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    title: str
    language: Language
    code: str = ""
    folder_id: str | None = None
    user_id: str
    group_id: str | None = None
    is_group_program: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
