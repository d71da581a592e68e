"""
MarkNote — Note SQLAlchemy Model
=================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic mirrors it in migrations.
Who:   Used by NoteService for CRUD operations and by templates for display.

Table Design:
    - UUID primary key: assigned in Python so the id is known right after flush
    - title: VARCHAR(200), indexed (the form enforces the same 200-char limit)
    - content: TEXT, raw Markdown source, no length limit
    - created_at / updated_at: UTC with timezone, managed by the application

    Indexes on title and created_at back the two query patterns: the list
    view ordered by created_at DESC, and lookups/search over titles.
"""

import re
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from marknote.database import Base

TITLE_MAX_LENGTH = 200
PREVIEW_LENGTH = 150
TRUNCATION_MARKER = "..."

# Literal removal of Markdown control characters; this is not a Markdown parser.
_MARKDOWN_CHARS = re.compile(r"[#*`_\[\]()]")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def derive_preview(content: str, max_length: int = PREVIEW_LENGTH) -> str:
    """
    Build a plain-text preview of Markdown `content`.

    Strips `# * ` _ [ ] ( )`, trims surrounding whitespace, then cuts the
    text so it is at most `max_length` characters long. When the text is
    cut, the last characters are replaced by TRUNCATION_MARKER, so the marker
    counts toward `max_length`:

        >>> derive_preview("# Big title with **bold** text", 20)
        'Big title with bo...'
    """
    text = _MARKDOWN_CHARS.sub("", content or "").strip()
    if len(text) <= max_length:
        return text
    stop = max(max_length - len(TRUNCATION_MARKER), 0)
    return text[:stop] + TRUNCATION_MARKER


class Note(Base):
    """
    A titled Markdown note.

    Lifecycle:
        1. Created through NoteService.create_note (id and timestamps assigned)
        2. Mutated in place through NoteService.update_note (updated_at refreshed)
        3. Permanently removed through NoteService.delete_note (no soft delete)

    Query Patterns:
        - List recent notes: SELECT ... ORDER BY created_at DESC LIMIT 50
        - Search: WHERE title ILIKE :pattern OR content ILIKE :pattern
        - Get single note: SELECT ... WHERE id = :uuid
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    __table_args__ = (
        Index("ix_notes_title", "title"),
        Index("ix_notes_created_at", "created_at"),
    )

    def preview(self, length: int = PREVIEW_LENGTH) -> str:
        """Plain-text preview of the content; see derive_preview."""
        return derive_preview(self.content, length)

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, created_at='{self.created_at}')>"
