"""
MarkNote — Note Service (Business Logic)
=========================================

What:  Every read and write against the `notes` table, plus the note
       validation rules.
Why:   Keeps business rules independent of HTTP concerns; routes only parse
       requests and pick a template or redirect.
Who:   Called by the notes route handlers.

Operations:
    create_note(db, payload)        → Note          | ValidationError
    get_note(db, note_id)           → Note          | NotFoundError
    update_note(db, note_id, payload) → Note        | ValidationError | NotFoundError
    delete_note(db, note_id)        → None          | NotFoundError
    list_notes(db, search, limit)   → List[Note]

Writes are flushed, not committed: the per-request session dependency in
database.py commits once the handler returns.

Error Handling Strategy:
    Missing rows become NotFoundError. SQLAlchemy failures are logged and
    wrapped in DatabaseError so no SQL or driver detail reaches a page.
"""

import logging
from typing import Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy import desc, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marknote.config import settings
from marknote.exceptions import DatabaseError, NotFoundError, ValidationError
from marknote.models.note import TITLE_MAX_LENGTH, Note, utcnow
from marknote.schemas.note import NoteInput

logger = logging.getLogger(__name__)

NoteId = Union[str, UUID]

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so `term` matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class NoteService:
    """
    Business logic layer for note operations.

    Stateless: the session is passed to every call, so a single module-level
    instance serves all requests.
    """

    def validate(self, payload: NoteInput) -> None:
        """
        Apply the note rules to `payload`.

        Rules:
            title   — present (not blank) and at most 200 characters
            content — present (not blank)

        Raises:
            ValidationError with every failing field, so the form can show
            all problems at once.
        """
        errors: Dict[str, List[str]] = {}

        if not payload.title.strip():
            errors.setdefault("title", []).append("Title can't be blank")
        if len(payload.title) > TITLE_MAX_LENGTH:
            errors.setdefault("title", []).append(
                f"Title is too long (maximum is {TITLE_MAX_LENGTH} characters)"
            )
        if not payload.content.strip():
            errors.setdefault("content", []).append("Content can't be blank")

        if errors:
            raise ValidationError(errors=errors)

    async def create_note(self, db: AsyncSession, payload: NoteInput) -> Note:
        """
        Validate and persist a new note.

        Returns:
            The new Note with id, created_at and updated_at assigned.

        Raises:
            ValidationError: payload breaks a note rule (nothing is written)
            DatabaseError: the insert failed
        """
        self.validate(payload)

        now = utcnow()
        note = Note(
            title=payload.title,
            content=payload.content,
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(note)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Note created: %s", note.id)
        return note

    async def get_note(self, db: AsyncSession, note_id: NoteId) -> Note:
        """
        Retrieve a single note by ID.

        Query plan:
            SELECT * FROM notes WHERE id = :uuid → primary key lookup

        Raises:
            NotFoundError: no note has this id, or the id is not a UUID
            DatabaseError: query execution failed
        """
        uid = self._parse_id(note_id)
        try:
            result = await db.execute(select(Note).where(Note.id == uid))
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id)},
            ) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def update_note(
        self, db: AsyncSession, note_id: NoteId, payload: NoteInput
    ) -> Note:
        """
        Overwrite title and content of an existing note.

        The lookup runs first, so an unknown id is reported as NotFoundError
        even when the payload is also invalid. Concurrent updates are
        last-write-wins.

        Raises:
            NotFoundError: no note has this id
            ValidationError: payload breaks a note rule (the note is unchanged)
            DatabaseError: the update failed
        """
        note = await self.get_note(db, note_id)
        self.validate(payload)

        note.title = payload.title
        note.content = payload.content
        note.updated_at = utcnow()
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            ) from e

        logger.info("Note updated: %s", note.id)
        return note

    async def delete_note(self, db: AsyncSession, note_id: NoteId) -> None:
        """
        Permanently remove a note.

        Raises:
            NotFoundError: no note has this id
            DatabaseError: the delete failed
        """
        note = await self.get_note(db, note_id)
        try:
            await db.delete(note)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            ) from e

        logger.info("Note deleted: %s", note_id)

    async def list_notes(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Note]:
        """
        List notes newest first, optionally filtered by a search term.

        How:
            - No term (or a blank one): every note
            - Term: notes whose title OR content contains it, case-insensitive.
              The term is bound as a parameter with LIKE wildcards escaped,
              so "50%" matches the text "50%" and nothing else.
            - ORDER BY created_at DESC LIMIT :limit (default 50)

        Query plan (with term):
            SELECT * FROM notes
            WHERE title ILIKE :pattern ESCAPE '\\' OR content ILIKE :pattern ESCAPE '\\'
            ORDER BY created_at DESC LIMIT :limit
        """
        if limit is None:
            limit = settings.notes_list_limit

        query = select(Note)
        if search is not None and search.strip():
            pattern = f"%{escape_like(search)}%"
            query = query.where(
                or_(
                    Note.title.ilike(pattern, escape=LIKE_ESCAPE),
                    Note.content.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        query = query.order_by(desc(Note.created_at)).limit(limit)

        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e
        return list(result.scalars().all())

    @staticmethod
    def _parse_id(note_id: NoteId) -> UUID:
        if isinstance(note_id, UUID):
            return note_id
        try:
            return UUID(str(note_id))
        except ValueError:
            raise NotFoundError(resource="note", resource_id=str(note_id))


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
