"""Note repository for database operations."""

from typing import List, Optional

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note, NoteVersion


class NoteRepository:
    """Repository for notes and their version history.

    Nothing here commits: several writes (a snapshot plus the note change)
    go out together when the service commits the session.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: dict) -> Note:
        """Insert a note and flush so it gets its id."""
        note = Note(**note_data)
        self.session.add(note)
        await self.session.flush()
        return note

    async def get_by_id(self, note_id: int) -> Optional[Note]:
        """Get note by ID."""
        stmt = select(Note).where(Note.id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_note(self, note: Note, update_data: dict) -> Note:
        """Apply ``update_data`` to a loaded note."""
        for key, value in update_data.items():
            setattr(note, key, value)
        await self.session.flush()
        return note

    async def delete_note(self, note_id: int) -> bool:
        """Delete the note and its versions. Returns False if no note was removed."""
        # explicit so no orphans are left even where the DB doesn't enforce FK cascades
        await self.session.execute(delete(NoteVersion).where(NoteVersion.note_id == note_id))
        result = await self.session.execute(delete(Note).where(Note.id == note_id))
        return result.rowcount > 0

    async def list_notes(self, page: int = 1, per_page: int = 20) -> tuple[List[Note], int]:
        """All notes, most recently updated first, with the total count."""
        offset = (page - 1) * per_page

        total_result = await self.session.execute(select(func.count(Note.id)))
        total_count = total_result.scalar()

        stmt = select(Note).order_by(desc(Note.updated_at), desc(Note.id)).offset(offset).limit(per_page)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total_count

    async def add_version(self, note: Note) -> NoteVersion:
        """Snapshot the note's current title and description."""
        version = note.snapshot()
        self.session.add(version)
        await self.session.flush()
        return version

    async def get_version(self, version_id: int) -> Optional[NoteVersion]:
        stmt = select(NoteVersion).where(NoteVersion.id == version_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def latest_version(self, note_id: int) -> Optional[NoteVersion]:
        stmt = (
            select(NoteVersion)
            .where(NoteVersion.note_id == note_id)
            .order_by(desc(NoteVersion.created_at), desc(NoteVersion.id))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_versions(self, note_id: int) -> List[NoteVersion]:
        """Versions of a note, newest first."""
        stmt = (
            select(NoteVersion)
            .where(NoteVersion.note_id == note_id)
            .order_by(desc(NoteVersion.created_at), desc(NoteVersion.id))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_versions(self, note_id: int) -> int:
        stmt = select(func.count(NoteVersion.id)).where(NoteVersion.note_id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()
