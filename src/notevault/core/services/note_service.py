"""Note service implementation."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...security import hash_password
from ..exceptions import InternalError, NotFoundError, ValidationError
from ..models.note import Note
from ..models.user import User
from ..notifier import ChangeAction, ChangeEvent, ChangeNotifier
from ..repositories.note_repository import NoteRepository
from ..repositories.user_repository import UserRepository
from ..schemas.notes import (
    CurrentVersionResponse,
    NoteCreate,
    NoteListItem,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    NoteVersionResponse,
    OwnerSummary,
    VersionEntry,
)
from .access_guard import AccessGuard
from .interfaces import INoteService

logger = logging.getLogger(__name__)


class NoteService(INoteService):
    """Note service implementation.

    Every operation that writes more than one row runs as one commit on the
    request's session; change events are published only after that commit.
    """

    def __init__(self, session: AsyncSession, notifier: Optional[ChangeNotifier] = None):
        self.session = session
        self.notifier = notifier
        self.note_repo = NoteRepository(session)
        # Used to fetch owner details for responses
        self.user_repo = UserRepository(session)

    async def create_note(self, user_id: int, request: NoteCreate) -> NoteResponse:
        """Create a note together with its initial version."""
        if request.is_protected and not request.password:
            raise ValidationError("Password is required for protected notes")

        note_data = {
            "title": request.title,
            "description": request.description,
            "is_protected": request.is_protected,
            "password_hash": hash_password(request.password) if request.is_protected else None,
            "owner_id": user_id,
        }

        async with self._unit_of_work("create"):
            note = await self.note_repo.create_note(note_data)
            # seed the history so the version list is never empty
            await self.note_repo.add_version(note)

        await self._publish("create", note, user_id)
        return await self._note_to_response(note, user_id)

    async def get_note(self, note_id: int, user_id: int) -> NoteResponse:
        """Get note by ID.

        Any authenticated user may read a note; the description of a
        protected note is only included for its owner.
        """
        note = AccessGuard.require_note(await self.note_repo.get_by_id(note_id))
        return await self._note_to_response(note, user_id)

    async def list_notes(self, page: int = 1, per_page: int = 20) -> NoteListResponse:
        """List note metadata with pagination."""
        if page < 1:
            page = 1
        if per_page < 1 or per_page > 100:
            per_page = 20

        notes, total_count = await self.note_repo.list_notes(page, per_page)
        owners = await self.user_repo.get_many(note.owner_id for note in notes)

        items = [
            NoteListItem(
                id=note.id,
                title=note.title,
                is_protected=note.is_protected,
                owner_id=note.owner_id,
                owner=self._owner_summary(owners.get(note.owner_id)),
                created_at=note.created_at,
                updated_at=note.updated_at,
            )
            for note in notes
        ]
        return NoteListResponse.create(items=items, total=total_count, page=page, per_page=per_page)

    async def update_note(self, note_id: int, user_id: int, request: NoteUpdate) -> NoteResponse:
        """Snapshot the note's current state, then apply the patch.

        The first edit after creation skips the snapshot: the version stored
        at creation already holds that state. Every later edit adds one.
        """
        note = AccessGuard.require_owner(await self.note_repo.get_by_id(note_id), user_id)
        update_data = self._build_update(note, request)

        async with self._unit_of_work("update"):
            if note.revision > 0 or await self.note_repo.latest_version(note.id) is None:
                await self.note_repo.add_version(note)
            update_data["revision"] = note.revision + 1
            await self.note_repo.update_note(note, update_data)

        await self._publish("update", note, user_id)
        return await self._note_to_response(note, user_id)

    async def delete_note(self, note_id: int, user_id: int) -> None:
        """Delete a note; its versions go with it."""
        note = AccessGuard.require_owner(await self.note_repo.get_by_id(note_id), user_id)
        title = note.title

        async with self._unit_of_work("delete"):
            deleted = await self.note_repo.delete_note(note.id)
            if not deleted:
                # removed by a concurrent request between the lookup and the delete
                raise NotFoundError("Note not found")

        await self._publish("delete", note, user_id, title=title)

    async def list_versions(self, note_id: int, user_id: int) -> List[VersionEntry]:
        """The live note first, then every stored version newest first."""
        note = AccessGuard.require_readable(await self.note_repo.get_by_id(note_id), user_id)
        versions = await self.note_repo.list_versions(note.id)

        current = CurrentVersionResponse(
            note_id=note.id,
            title=note.title,
            description=note.description,
            created_at=note.updated_at,
        )
        return [current, *(NoteVersionResponse.model_validate(v) for v in versions)]

    async def revert_note(self, note_id: int, user_id: int, version_id: int) -> NoteResponse:
        """Restore title and description from a version of this note.

        The state being replaced is snapshotted first, so a revert can itself
        be reverted. Protection settings are left alone.
        """
        note = AccessGuard.require_owner(await self.note_repo.get_by_id(note_id), user_id)

        version = await self.note_repo.get_version(version_id)
        if version is None or version.note_id != note.id:
            raise NotFoundError("Version not found")

        async with self._unit_of_work("revert"):
            await self.note_repo.add_version(note)
            await self.note_repo.update_note(
                note,
                {"title": version.title, "description": version.description, "revision": note.revision + 1},
            )

        await self._publish("revert", note, user_id, version_id=version.id)
        return await self._note_to_response(note, user_id)

    async def unlock_note(self, note_id: int, user_id: int, password: Optional[str]) -> NoteResponse:
        """Return the full note when ``password`` matches the note's password."""
        note = AccessGuard.verify_unlock(await self.note_repo.get_by_id(note_id), password)
        return await self._note_to_response(note, user_id, unlocked=True)

    @staticmethod
    def _build_update(note: Note, request: NoteUpdate) -> Dict[str, Any]:
        """Translate a patch into column values, enforcing the protection rules."""
        update_data: Dict[str, Any] = {}

        for field in ("title", "description"):
            if request.provided(field):
                value = getattr(request, field)
                if value is None:
                    raise ValidationError(f"{field.capitalize()} cannot be cleared")
                update_data[field] = value

        protect = note.is_protected
        if request.is_protected is not None:
            protect = request.is_protected
        new_password = request.password or None

        if protect:
            if new_password:
                update_data["password_hash"] = hash_password(new_password)
            elif not note.is_protected:
                raise ValidationError("Password is required when protecting a note")
            update_data["is_protected"] = True
        else:
            if new_password:
                raise ValidationError("A password can only be set on a protected note")
            update_data["is_protected"] = False
            update_data["password_hash"] = None

        return update_data

    @asynccontextmanager
    async def _unit_of_work(self, action: str):
        """Commit everything written inside the block, or nothing."""
        try:
            yield
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to {action} note", exc_info=e)
            raise InternalError(f"Server error while trying to {action} note") from e
        except Exception:
            await self.session.rollback()
            raise

    async def _publish(
        self,
        action: ChangeAction,
        note: Note,
        user_id: int,
        title: Optional[str] = None,
        version_id: Optional[int] = None,
    ) -> None:
        """Announce a committed change. Never raises."""
        if self.notifier is None:
            return
        try:
            await self.notifier.publish(
                ChangeEvent(
                    action=action,
                    note_id=note.id,
                    user_id=user_id,
                    title=title if title is not None else note.title,
                    version_id=version_id,
                )
            )
        except Exception as e:
            logger.warning(f"Change event for note {note.id} dropped: {e}")

    async def _note_to_response(
        self, note: Note, current_user_id: int, unlocked: bool = False
    ) -> NoteResponse:
        """Convert note model to response, withholding locked content."""
        readable = unlocked or AccessGuard.can_read_content(note, current_user_id)
        owner = await self.user_repo.get_by_id(note.owner_id)

        return NoteResponse(
            id=note.id,
            title=note.title,
            description=note.description if readable else None,
            is_protected=note.is_protected,
            needs_password=not readable,
            owner_id=note.owner_id,
            owner=self._owner_summary(owner),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )

    @staticmethod
    def _owner_summary(user: Optional[User]) -> Optional[OwnerSummary]:
        if user is None:
            return None
        return OwnerSummary(id=user.id, name=user.name, email=user.email)
