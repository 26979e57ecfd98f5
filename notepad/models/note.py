"""
Note Pad API: Note SQLAlchemy Model
=====================================

What:  ORM model representing the `notes` table.
Why:   Maps Python objects to database rows for type-safe queries.
How:   Inherits from the declarative Base; Alembic reads this for migrations.
Who:   Used by NoteService for CRUD statements and by Alembic.

Table Design:
    - UUID primary key: non-sequential, generated in Python at insert time
      (the migration also carries a gen_random_uuid() server default)
    - title: VARCHAR(255), the only length-bounded field
    - content: TEXT, unbounded
    - created_at / updated_at: TIMESTAMP WITH TIME ZONE, UTC

    Index on created_at DESC backs the newest-first listing.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import TIMESTAMP, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from notepad.database import Base

TITLE_MAX_LENGTH = 255


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A single note.

    Lifecycle:
        1. Inserted by create (id and both timestamps assigned)
        2. title/content replaced by update; updated_at bumped every time
        3. Removed by delete; the id is never reused
    """

    __tablename__ = "notes"

    # ── Primary Key ───────────────────────────────────────────────────────
    # Generic Uuid: native UUID on PostgreSQL, CHAR(32) elsewhere (SQLite in tests)
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier, immutable",
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
        comment="Note title, 1-255 characters",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Note body, may be empty",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    # Stored in UTC; conversion to local time is the client's job
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
        comment="When this note was last modified (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, updated_at='{self.updated_at}')>"
