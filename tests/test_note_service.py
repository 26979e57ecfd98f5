"""
Note Pad API: Note Service Tests
==================================

What:  Tests for NoteService CRUD logic.
How:   Unit tests use a mock session (no database); the integration classes
       run the same service against an in-memory SQLite database.

What we test:
    ✅ Validation happens before any statement is sent (incl. NUL / non-UTF-8 text)
    ✅ Missing rows raise NotFoundError for get/update/delete
    ✅ Driver failures become StorageError without leaking engine text
    ✅ Round trip, distinct ids, update monotonicity (even with a clock step back), repeated delete
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from notepad.services.note_service import NoteService
from notepad.exceptions import NotFoundError, StorageError, ValidationError
from notepad.schemas.note import NoteCreate, NoteUpdate


class TestNoteServiceValidation:
    """Rejected input never reaches the database."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_empty_title_rejected(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_note(mock_db_session, NoteCreate(title="", content="body"))

        assert exc_info.value.field == "title"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_whitespace_title_rejected(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.create_note(mock_db_session, NoteCreate(title="   ", content="body"))

    @pytest.mark.asyncio
    async def test_create_title_too_long_rejected(self, mock_db_session):
        with pytest.raises(ValidationError, match="at most 255"):
            await self.service.create_note(
                mock_db_session, NoteCreate(title="x" * 256, content="body")
            )
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_title_at_limit_accepted(self, mock_db_session, sample_note_row):
        mock_db_session.execute.return_value = MagicMock(**{"one.return_value": sample_note_row})

        await self.service.create_note(mock_db_session, NoteCreate(title="x" * 255, content="body"))

        mock_db_session.execute.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_null_title_rejected(self, mock_db_session):
        with pytest.raises(ValidationError, match="title must not be null"):
            await self.service.update_note(mock_db_session, uuid4(), NoteUpdate(title=None))
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_empty_title_rejected(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.update_note(mock_db_session, uuid4(), NoteUpdate(title=""))
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_nul_in_title_rejected(self, mock_db_session):
        with pytest.raises(ValidationError, match="NUL") as exc_info:
            await self.service.create_note(
                mock_db_session, NoteCreate(title="to\x00do", content="body")
            )

        assert exc_info.value.field == "title"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_lone_surrogate_content_rejected(self, mock_db_session):
        payload = NoteCreate.model_construct(title="Title", content="broken \ud800 text")

        with pytest.raises(ValidationError, match="UTF-8") as exc_info:
            await self.service.create_note(mock_db_session, payload)

        assert exc_info.value.field == "content"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_lone_surrogate_title_rejected(self, mock_db_session):
        payload = NoteUpdate.model_construct(title="\udfff")

        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_note(mock_db_session, uuid4(), payload)

        assert exc_info.value.field == "title"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_nul_in_content_rejected(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_note(
                mock_db_session, uuid4(), NoteUpdate(content="\x00")
            )

        assert exc_info.value.field == "content"
        mock_db_session.execute.assert_not_awaited()


class TestNoteServiceUnit:
    """Row mapping and error translation with a mocked session."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_create_returns_note(self, mock_db_session, sample_note_row):
        mock_db_session.execute.return_value = MagicMock(**{"one.return_value": sample_note_row})

        result = await self.service.create_note(
            mock_db_session, NoteCreate(title="Groceries", content="Milk, eggs")
        )

        assert result.id == sample_note_row.id
        assert result.title == "Groceries"
        assert result.created_at == result.updated_at

    @pytest.mark.asyncio
    async def test_get_note_not_found(self, mock_db_session):
        mock_result = MagicMock()
        mock_result.one_or_none.return_value = None
        mock_db_session.execute.return_value = mock_result

        with pytest.raises(NotFoundError):
            await self.service.get_note(mock_db_session, uuid4())

    @pytest.mark.asyncio
    async def test_update_missing_row_raises_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(**{"one_or_none.return_value": None})

        with pytest.raises(NotFoundError):
            await self.service.update_note(mock_db_session, uuid4(), NoteUpdate(content="x"))

    @pytest.mark.asyncio
    async def test_delete_missing_row_raises_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(**{"scalar_one_or_none.return_value": None})

        with pytest.raises(NotFoundError):
            await self.service.delete_note(mock_db_session, uuid4())

    @pytest.mark.asyncio
    async def test_list_empty(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock(**{"all.return_value": []})

        assert await self.service.list_notes(mock_db_session) == []

    @pytest.mark.asyncio
    async def test_storage_failure_wrapped(self, mock_db_session):
        note_id = uuid4()
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT ...", {}, Exception("connection refused"))
        )

        with pytest.raises(StorageError) as exc_info:
            await self.service.get_note(mock_db_session, note_id)

        err = exc_info.value
        assert err.context["operation"] == "get"
        assert err.context["note_id"] == str(note_id)
        assert err.context["error_type"] == "OperationalError"
        assert "connection refused" not in err.message

    @pytest.mark.asyncio
    async def test_commit_failure_wrapped(self, mock_db_session, sample_note_row):
        mock_db_session.execute.return_value = MagicMock(**{"one.return_value": sample_note_row})
        mock_db_session.commit = AsyncMock(side_effect=OSError("socket closed"))

        with pytest.raises(StorageError) as exc_info:
            await self.service.create_note(mock_db_session, NoteCreate(title="t", content="c"))

        assert exc_info.value.operation == "create"


class TestNoteServiceDatabase:
    """The service against a real (in-memory SQLite) database."""

    def setup_method(self):
        self.service = NoteService()

    @pytest.mark.asyncio
    async def test_round_trip(self, db_session):
        created = await self.service.create_note(
            db_session, NoteCreate(title="Groceries", content="Milk, eggs")
        )
        fetched = await self.service.get_note(db_session, created.id)

        assert fetched.title == "Groceries"
        assert fetched.content == "Milk, eggs"
        assert fetched.created_at == fetched.updated_at

    @pytest.mark.asyncio
    async def test_empty_content_allowed(self, db_session):
        created = await self.service.create_note(db_session, NoteCreate(title="Title", content=""))

        assert created.content == ""

    @pytest.mark.asyncio
    async def test_identical_notes_get_distinct_ids(self, db_session):
        payload = NoteCreate(title="Same", content="Same")
        first = await self.service.create_note(db_session, payload)
        second = await self.service.create_note(db_session, payload)

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_update_changes_only_supplied_fields(self, db_session):
        created = await self.service.create_note(
            db_session, NoteCreate(title="Groceries", content="Milk, eggs")
        )

        updated = await self.service.update_note(
            db_session, created.id, NoteUpdate(content="Milk, eggs, bread")
        )

        assert updated.title == "Groceries"
        assert updated.content == "Milk, eggs, bread"
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_empty_update_bumps_timestamp_only(self, db_session):
        created = await self.service.create_note(db_session, NoteCreate(title="t", content="c"))

        updated = await self.service.update_note(db_session, created.id, NoteUpdate())

        assert (updated.title, updated.content) == ("t", "c")
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_update_with_clock_behind_keeps_timestamp_order(self, db_session):
        created = await self.service.create_note(db_session, NoteCreate(title="t", content="c"))
        clock = MagicMock()
        clock.now.return_value = datetime.now(timezone.utc) - timedelta(seconds=5)

        with patch("notepad.services.note_service.datetime", clock):
            updated = await self.service.update_note(
                db_session, created.id, NoteUpdate(content="later")
            )

        assert updated.content == "later"
        assert updated.created_at == created.created_at
        assert updated.updated_at >= updated.created_at
        assert updated.updated_at >= created.updated_at

    @pytest.mark.asyncio
    async def test_delete_twice_raises_not_found(self, db_session):
        created = await self.service.create_note(db_session, NoteCreate(title="t", content="c"))

        await self.service.delete_note(db_session, created.id)

        with pytest.raises(NotFoundError):
            await self.service.delete_note(db_session, created.id)
        with pytest.raises(NotFoundError):
            await self.service.get_note(db_session, created.id)
        with pytest.raises(NotFoundError):
            await self.service.update_note(db_session, created.id, NoteUpdate(title="again"))

    @pytest.mark.asyncio
    async def test_list_newest_first(self, db_session):
        first = await self.service.create_note(db_session, NoteCreate(title="first", content=""))
        second = await self.service.create_note(db_session, NoteCreate(title="second", content=""))

        notes = await self.service.list_notes(db_session)

        assert isinstance(notes, list)
        assert [n.id for n in notes] == [second.id, first.id]
