"""
NoteAssist Backend — Note Service (Owner-Scoped CRUD)
======================================================

What:  Business logic for listing, reading, creating, updating and deleting notes.
Why:   Keeps the per-user isolation rule in exactly one place, independent of HTTP.
How:   Every query carries `Note.user_id == user_id` next to the id filter.
Who:   Called by the notes route handlers with the verified identity's id.

Isolation rule:
    A note that exists but belongs to someone else is reported exactly like
    a note that does not exist (NotFoundError). So is an id that is not a
    valid UUID. Callers can never probe for other users' notes.

Design Decision:
    NoteService is stateless: it receives the db session for each call.
    Each operation is one independent statement round trip; the session
    dependency commits after the handler returns.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from noteassist.config import settings
from noteassist.exceptions import DatabaseError, NotFoundError
from noteassist.models.note import DEFAULT_CONTENT, DEFAULT_TITLE, Note, utcnow
from noteassist.schemas.note import NoteCreate, NoteResponse, NoteUpdate

logger = logging.getLogger(__name__)


def _parse_note_id(note_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(note_id))
    except ValueError:
        raise NotFoundError(resource="note", resource_id=str(note_id))


class NoteService:
    """
    Owner-scoped note operations.

    Error Handling Strategy:
        NotFoundError propagates as-is. Any other failure is logged with its
        type and wrapped in DatabaseError, which the global handler turns
        into a generic 500.
    """

    async def list_notes(self, db: AsyncSession, user_id: str) -> List[NoteResponse]:
        """
        All notes owned by `user_id`, most recently updated first.

        Query plan:
            SELECT * FROM notes WHERE user_id = :uid ORDER BY updated_at DESC
            → served by idx_notes_user_updated_at
        """
        try:
            result = await db.execute(
                select(Note)
                .where(Note.user_id == user_id)
                .order_by(Note.updated_at.desc())
            )
            notes = result.scalars().all()
        except Exception as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch notes",
                context={"error_type": type(e).__name__},
            )

        return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(self, db: AsyncSession, user_id: str, note_id: str) -> NoteResponse:
        """
        Raises:
            NotFoundError: No note with this id owned by `user_id` (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        note = await self._get_owned(db, user_id, note_id, action="fetch")
        return NoteResponse.model_validate(note)

    async def create_note(
        self,
        db: AsyncSession,
        user_id: str,
        payload: NoteCreate,
    ) -> NoteResponse:
        """
        Persist a new note owned by `user_id`.

        Defaults: empty or missing title → "Untitled Note";
        missing content → "". Both timestamps get the same instant.
        """
        now = utcnow()
        note = Note(
            user_id=user_id,
            title=payload.title or DEFAULT_TITLE,
            content=payload.content or DEFAULT_CONTENT,
            created_at=now,
            updated_at=now,
        )

        try:
            db.add(note)
            await db.flush()  # Assigns the id without committing
        except Exception as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create note",
                context={"error_type": type(e).__name__},
            )

        logger.info("Note %s created", note.id)
        return NoteResponse.model_validate(note)

    async def update_note(
        self,
        db: AsyncSession,
        user_id: str,
        note_id: str,
        payload: NoteUpdate,
        mode: Optional[str] = None,
    ) -> NoteResponse:
        """
        Change title/content of an owned note and refresh `updated_at`.

        Modes (NOTE_UPDATE_MODE unless `mode` is given):
            replace  Both fields are written. A field missing from the body
                     is written as its creation default.
            merge    Only fields present in the body (and not null) are written.

        Raises:
            NotFoundError: No owned note with this id; nothing is modified.
        """
        mode = mode or settings.note_update_mode
        note = await self._get_owned(db, user_id, note_id, action="update")

        if mode == "merge":
            changes = {
                field: getattr(payload, field)
                for field in payload.model_fields_set
                if getattr(payload, field) is not None
            }
        else:
            changes = {
                "title": payload.title or DEFAULT_TITLE,
                "content": payload.content or DEFAULT_CONTENT,
            }

        for field, value in changes.items():
            setattr(note, field, value)
        note.updated_at = utcnow()

        try:
            await db.flush()
        except Exception as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update note",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

        logger.info("Note %s updated (%s: %s)", note.id, mode, ", ".join(sorted(changes)) or "-")
        return NoteResponse.model_validate(note)

    async def delete_note(self, db: AsyncSession, user_id: str, note_id: str) -> None:
        """
        Hard-delete an owned note.

        Raises:
            NotFoundError: No owned note with this id (a second delete lands here).
        """
        parsed_id = _parse_note_id(note_id)

        try:
            result = await db.execute(
                delete(Note).where(Note.id == parsed_id, Note.user_id == user_id)
            )
        except Exception as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete note",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

        if result.rowcount == 0:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        logger.info("Note %s deleted", parsed_id)

    async def _get_owned(
        self,
        db: AsyncSession,
        user_id: str,
        note_id: str,
        action: str,
    ) -> Note:
        parsed_id = _parse_note_id(note_id)

        try:
            result = await db.execute(
                select(Note).where(Note.id == parsed_id, Note.user_id == user_id)
            )
            note = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Failed to {action} note",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note


# ── Singleton Instance ────────────────────────────────────────────────────
# NoteService is stateless; one instance serves every request
note_service = NoteService()
