"""NoteService against mocked repositories."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.exc import OperationalError

from src.notevault.core.exceptions import InternalError, NotFoundError
from src.notevault.core.models.note import Note
from src.notevault.core.models.user import User
from src.notevault.core.services.note_service import NoteService


class TestNoteServiceMocked:
    """Owner details and failure handling without a database."""

    @pytest.fixture
    def mock_session(self):
        session = Mock()
        session.commit = AsyncMock()
        session.rollback = AsyncMock()
        return session

    @pytest.fixture
    def notifier(self):
        return AsyncMock()

    @pytest.fixture
    def note_service(self, mock_session, notifier):
        service = NoteService(mock_session, notifier)
        service.note_repo = AsyncMock()
        service.user_repo = AsyncMock()
        return service

    @pytest.fixture
    def owner(self):
        owner = Mock(spec=User)
        owner.id = 7
        owner.name = "Owner Seven"
        owner.email = "owner7@example.com"
        return owner

    @pytest.fixture
    def note(self):
        now = datetime.now(timezone.utc)
        return Note(
            id=3,
            title="Groceries",
            description="milk",
            is_protected=False,
            password_hash=None,
            revision=0,
            owner_id=7,
            created_at=now,
            updated_at=now,
        )

    @pytest.mark.asyncio
    async def test_response_carries_owner(self, note_service, note, owner):
        note_service.note_repo.get_by_id.return_value = note
        note_service.user_repo.get_by_id.return_value = owner

        result = await note_service.get_note(note.id, user_id=99)

        assert result.owner.name == "Owner Seven"
        assert result.owner.email == "owner7@example.com"
        assert result.description == "milk"

    @pytest.mark.asyncio
    async def test_missing_owner_leaves_owner_empty(self, note_service, note):
        note_service.note_repo.get_by_id.return_value = note
        note_service.user_repo.get_by_id.return_value = None

        result = await note_service.get_note(note.id, user_id=7)

        assert result.owner is None
        assert result.owner_id == 7

    @pytest.mark.asyncio
    async def test_database_failure_rolls_back(self, note_service, mock_session, notifier, note):
        note_service.note_repo.get_by_id.return_value = note
        note_service.note_repo.get_version.return_value = Mock(id=11, note_id=note.id, title="a", description="b")
        note_service.note_repo.add_version.side_effect = OperationalError("INSERT", {}, Exception("disk full"))

        with pytest.raises(InternalError):
            await note_service.revert_note(note.id, 7, 11)

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()
        notifier.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_delete_is_not_found(self, note_service, mock_session, notifier, note):
        note_service.note_repo.get_by_id.return_value = note
        note_service.note_repo.delete_note.return_value = False

        with pytest.raises(NotFoundError):
            await note_service.delete_note(note.id, 7)

        mock_session.rollback.assert_awaited_once()
        notifier.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_publish_happens_after_commit(self, note_service, mock_session, notifier, note, owner):
        calls = []
        mock_session.commit.side_effect = lambda: calls.append("commit")
        notifier.publish.side_effect = lambda event: calls.append(event.action)
        note_service.note_repo.get_by_id.return_value = note
        note_service.user_repo.get_by_id.return_value = owner

        await note_service.delete_note(note.id, 7)

        assert calls == ["commit", "delete"]
        assert notifier.publish.await_args.args[0].title == "Groceries"
