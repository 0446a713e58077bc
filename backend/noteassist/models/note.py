"""
NoteAssist Backend — Note SQLAlchemy Model
============================================

What:  ORM model representing the `notes` table.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design:
    - id:          UUID primary key, generated client-side (portable across
                   PostgreSQL and SQLite)
    - user_id:     Google account subject (`sub`) of the owner; every query
                   filters on it
    - title:       Free text, "Untitled Note" when not supplied
    - content:     Free text, "" when not supplied
    - created_at:  Set once, never mutated
    - updated_at:  Refreshed on every successful update

    Index on (user_id, updated_at DESC):
        Serves the list query "all of my notes, most recently edited first"
        without a sort step.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from noteassist.database import Base


DEFAULT_TITLE = "Untitled Note"
DEFAULT_CONTENT = ""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A user-owned text note.

    Lifecycle:
        1. Created by POST /api/notes (owner taken from the verified identity)
        2. Title/content changed by PUT /api/notes/{id}
        3. Removed by DELETE /api/notes/{id} (hard delete)
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier assigned by the store",
    )

    # Immutable after creation; never read from the request body
    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Verified identity subject of the owner",
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_TITLE,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_CONTENT,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When this note was last modified (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_user_updated_at", user_id, updated_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, user_id='{self.user_id}', "
            f"updated_at='{self.updated_at}')>"
        )
