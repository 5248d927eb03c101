"""
Base class, ArchiveMixin and ArchiveState for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, Select, String, false
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from shared.utils.exceptions import ValidationError


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class ArchiveMixin:
    """
    Mixin providing the logical-delete (archive) columns for every archivable model.

    A row is either Active (is_archived=False, archived_at/archived_by NULL)
    or Archived (is_archived=True, archived_at/archived_by set). Rows start
    Active and only the archive engine changes these three columns; foreign
    keys are never touched by archive or restore.
    """

    is_archived: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False, index=True
    )
    archived_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    archived_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    @property
    def archive_state(self) -> "ArchiveState":
        return ArchiveState.ARCHIVED if self.is_archived else ArchiveState.ACTIVE

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        pk = self.__mapper__.primary_key[0].key  # type: ignore[attr-defined]
        state = "archived" if self.is_archived else "active"
        return f"<{class_name}({pk}={getattr(self, pk, None)}, {state})>"


class ArchiveState(str, Enum):
    """Visibility filter for listings: active rows, archived rows or both."""

    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    ALL = "ALL"

    @classmethod
    def from_raw(cls, raw: str | None) -> "ArchiveState":
        """
        Parse an archive state value.

        Defaults to ACTIVE for None/blank input; matching is case-insensitive.
        """
        if raw is None or not raw.strip():
            return cls.ACTIVE
        try:
            return cls(raw.strip().upper())
        except ValueError:
            raise ValidationError(f"Unsupported archiveState: {raw}", field="archive_state")

    def apply(self, stmt: Select, is_archived_column) -> Select:
        """Restrict a SELECT to the rows visible under this state."""
        if self is ArchiveState.ACTIVE:
            return stmt.where(is_archived_column.is_(False))
        if self is ArchiveState.ARCHIVED:
            return stmt.where(is_archived_column.is_(True))
        return stmt
