"""
Note Pad API: Note Service (CRUD Business Logic)
==================================================

What:  The five note operations: create, get, list, update, delete.
Why:   Keeps validation and SQL in one place, independent of HTTP concerns.
How:   Each call validates its input, issues exactly one statement on the
       session it is given, commits, and maps the row to a NoteResponse.
Who:   Called by route handlers in routes/notes.py.

Statement per operation:
    create  →  INSERT ... RETURNING
    get     →  SELECT ... WHERE id = :id
    list    →  SELECT ... ORDER BY created_at DESC, id
    update  →  UPDATE ... WHERE id = :id RETURNING
    delete  →  DELETE ... WHERE id = :id RETURNING id

    Zero RETURNING rows means the id does not exist (→ NotFoundError), so no
    extra existence query is needed and concurrent writers simply race at
    the storage layer (last write wins).

Error Handling Strategy:
    Validation happens before any statement is sent. Driver and connection
    failures are wrapped in StorageError with the operation name and note id
    as context; nothing is retried here.

Design Decision:
    NoteService is stateless; it receives the session for each call. Tests
    pass either an AsyncMock or a real session on an in-memory database.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import case, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notepad.exceptions import NotFoundError, StorageError, ValidationError
from notepad.models.note import TITLE_MAX_LENGTH, Note
from notepad.schemas.note import NoteCreate, NoteResponse, NoteUpdate

logger = logging.getLogger(__name__)

# Columns every statement returns; rows map straight onto NoteResponse
_NOTE_COLUMNS = (Note.id, Note.title, Note.content, Note.created_at, Note.updated_at)

# asyncpg can surface socket failures as OSError before SQLAlchemy wraps them
_STORAGE_ERRORS = (SQLAlchemyError, OSError)


class NoteService:
    """
    CRUD operations over the notes table.

    Responsibilities:
        - create_note(): validate, assign id + timestamps, insert
        - get_note(): single lookup with not-found handling
        - list_notes(): every note, newest first
        - update_note(): partial update, always bumps updated_at
        - delete_note(): remove, not-found if already gone
    """

    # ── Validation ────────────────────────────────────────────────────────

    @staticmethod
    def _validate_text(value: str, field: str) -> None:
        """Reject text that PostgreSQL TEXT/VARCHAR cannot store."""
        if "\x00" in value:
            raise ValidationError(f"{field} must not contain NUL characters", field=field)
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            raise ValidationError(f"{field} must be valid UTF-8 text", field=field)

    @classmethod
    def _validate_title(cls, title: Optional[str]) -> None:
        if title is None:
            raise ValidationError("title is required", field="title")
        if not title.strip():
            raise ValidationError("title must not be empty", field="title")
        if len(title) > TITLE_MAX_LENGTH:
            raise ValidationError(
                f"title must be at most {TITLE_MAX_LENGTH} characters",
                field="title",
                context={"length": len(title)},
            )
        cls._validate_text(title, "title")

    @classmethod
    def _validate_content(cls, content: Optional[str]) -> None:
        # Empty content is a valid note body; only absence is rejected
        if content is None:
            raise ValidationError("content is required", field="content")
        cls._validate_text(content, "content")

    @staticmethod
    def _storage_error(
        operation: str, note_id: Optional[uuid.UUID], exc: BaseException
    ) -> StorageError:
        """Log the driver failure server-side and build the client-safe error."""
        logger.error(
            "Database error during %s (note_id=%s): %s",
            operation,
            note_id,
            str(exc),
            exc_info=True,
        )
        return StorageError(
            operation=operation,
            note_id=str(note_id) if note_id else None,
            context={"error_type": type(exc).__name__},
        )

    # ── Operations ────────────────────────────────────────────────────────

    async def create_note(self, db: AsyncSession, payload: NoteCreate) -> NoteResponse:
        """
        Insert a new note.

        created_at and updated_at come from one clock reading, so a fresh
        note always has created_at == updated_at.

        Raises:
            ValidationError: Empty/oversized title or missing content (→ 400)
            StorageError: Insert failed (→ 500)
        """
        self._validate_title(payload.title)
        self._validate_content(payload.content)

        now = datetime.now(timezone.utc)
        note_id = uuid.uuid4()
        stmt = (
            insert(Note)
            .values(
                id=note_id,
                title=payload.title,
                content=payload.content,
                created_at=now,
                updated_at=now,
            )
            .returning(*_NOTE_COLUMNS)
        )

        try:
            result = await db.execute(stmt)
            row = result.one()
            await db.commit()
        except _STORAGE_ERRORS as e:
            raise self._storage_error("create", note_id, e)

        logger.info("Note created: %s", row.id)
        return NoteResponse.model_validate(row)

    async def get_note(self, db: AsyncSession, note_id: uuid.UUID) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: No note with this id (→ 404)
            StorageError: Query failed (→ 500)
        """
        try:
            result = await db.execute(
                select(*_NOTE_COLUMNS).where(Note.id == note_id)
            )
            row = result.one_or_none()
        except _STORAGE_ERRORS as e:
            raise self._storage_error("get", note_id, e)

        if row is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return NoteResponse.model_validate(row)

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """
        Return every note, newest first.

        The result is a fully materialized list. id breaks ties between notes
        created in the same instant so the order is stable across calls.
        """
        try:
            result = await db.execute(
                select(*_NOTE_COLUMNS).order_by(Note.created_at.desc(), Note.id)
            )
            rows = result.all()
        except _STORAGE_ERRORS as e:
            raise self._storage_error("list", None, e)

        logger.debug("Listed %d notes", len(rows))
        return [NoteResponse.model_validate(row) for row in rows]

    async def update_note(
        self, db: AsyncSession, note_id: uuid.UUID, payload: NoteUpdate
    ) -> NoteResponse:
        """
        Replace the fields present in `payload` and bump updated_at.

        Fields absent from the request body keep their stored value. An empty
        body is accepted and only refreshes updated_at.

        Raises:
            ValidationError: A supplied field is null or invalid (→ 400)
            NotFoundError: No note with this id (→ 404)
            StorageError: Update failed (→ 500)
        """
        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if value is None:
                raise ValidationError(f"{field} must not be null", field=field)
        if "title" in changes:
            self._validate_title(changes["title"])
        if "content" in changes:
            self._validate_content(changes["content"])

        # Never earlier than the stored value, even if the clock stepped back
        now = datetime.now(timezone.utc)
        changes["updated_at"] = case((Note.updated_at > now, Note.updated_at), else_=now)
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            .values(**changes)
            .returning(*_NOTE_COLUMNS)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await db.execute(stmt)
            row = result.one_or_none()
            await db.commit()
        except _STORAGE_ERRORS as e:
            raise self._storage_error("update", note_id, e)

        if row is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        logger.info("Note updated: %s (fields=%s)", note_id, sorted(changes))
        return NoteResponse.model_validate(row)

    async def delete_note(self, db: AsyncSession, note_id: uuid.UUID) -> None:
        """
        Delete a note. A second delete of the same id raises NotFoundError.
        """
        stmt = (
            delete(Note)
            .where(Note.id == note_id)
            .returning(Note.id)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await db.execute(stmt)
            deleted_id = result.scalar_one_or_none()
            await db.commit()
        except _STORAGE_ERRORS as e:
            raise self._storage_error("delete", note_id, e)

        if deleted_id is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        logger.info("Note deleted: %s", note_id)


# Stateless, so one shared instance serves every request
note_service = NoteService()
