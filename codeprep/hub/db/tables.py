"""SQLAlchemy ORM models.

These are the single source of truth for the database schema.  Alembic reads
``Base.metadata`` to autogenerate migration scripts.

Uses SQLAlchemy 2.0 declarative style with ``Mapped`` type annotations.
Column types stay dialect-neutral so the schema can also be created on
SQLite for tests.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Text, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Timezone-aware timestamp type for all datetime columns.
TimestampTZ = DateTime(timezone=True)


class Base(DeclarativeBase):
    """Declarative base with naming convention for constraints."""

    pass


Base.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(primary_key=True)
    name: Mapped[str]
    email: Mapped[str] = mapped_column(unique=True)
    avatar_url: Mapped[str | None]
    created_at: Mapped[datetime] = mapped_column(TimestampTZ, server_default=func.now())


class Folder(Base):
    __tablename__ = "folders"
    __table_args__ = (Index("ix_folders_user_id", "user_id"),)

    id: Mapped[str] = mapped_column(primary_key=True)
    name: Mapped[str]
    user_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"))
    parent_id: Mapped[str | None] = mapped_column(ForeignKey("folders.id", name="fk_folders_parent_id"))
    created_at: Mapped[datetime] = mapped_column(TimestampTZ, server_default=func.now())


class Group(Base):
    __tablename__ = "groups"

    id: Mapped[str] = mapped_column(primary_key=True)
    name: Mapped[str]
    description: Mapped[str | None] = mapped_column(Text)
    invite_code: Mapped[str] = mapped_column(unique=True)
    created_by: Mapped[str] = mapped_column(ForeignKey("profiles.id"))
    created_at: Mapped[datetime] = mapped_column(TimestampTZ, server_default=func.now())


class GroupMember(Base):
    __tablename__ = "group_members"
    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="uq_group_members_user_id_group_id"),
        Index("ix_group_members_group_id", "group_id"),
    )

    id: Mapped[str] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"))
    group_id: Mapped[str] = mapped_column(ForeignKey("groups.id"))
    role: Mapped[str] = mapped_column(server_default="member")
    joined_at: Mapped[datetime] = mapped_column(TimestampTZ, server_default=func.now())


class Program(Base):
    __tablename__ = "programs"
    __table_args__ = (
        Index("ix_programs_user_id", "user_id"),
        Index("ix_programs_group_id", "group_id"),
        Index("ix_programs_folder_id", "folder_id"),
    )

    id: Mapped[str] = mapped_column(primary_key=True)
    title: Mapped[str]
    language: Mapped[str] = mapped_column(server_default="javascript")
    code: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    folder_id: Mapped[str | None] = mapped_column(ForeignKey("folders.id"))
    user_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"))
    group_id: Mapped[str | None] = mapped_column(ForeignKey("groups.id"))
    is_group_program: Mapped[bool] = mapped_column(default=False, server_default="false")
    created_at: Mapped[datetime] = mapped_column(TimestampTZ, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(TimestampTZ, server_default=func.now(), onupdate=func.now())


class Activity(Base):
    """Append-only activity log entry."""

    __tablename__ = "activities"
    __table_args__ = (
        Index("ix_activities_user_id", "user_id"),
        Index("ix_activities_group_id", "group_id"),
    )

    id: Mapped[str] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("profiles.id"))
    action: Mapped[str]
    target_type: Mapped[str]
    target_id: Mapped[str | None]
    target_name: Mapped[str | None]
    group_id: Mapped[str | None] = mapped_column(ForeignKey("groups.id"))
    created_at: Mapped[datetime] = mapped_column(TimestampTZ, server_default=func.now())
