"""
Ownership and protection checks for notes.

Authentication (token -> user) happens earlier, in ``middleware.auth``.
Once a caller is known, every note operation goes through these checks in
a fixed order: the note must exist (404) before ownership is judged (403).
Protection is orthogonal to ownership: the owner always reads the content,
anyone else only through a successful unlock, and nothing about an unlock
is remembered between requests.
"""

from typing import Optional

from ...security import verify_password
from ..exceptions import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from ..models.note import Note


class AccessGuard:
    """Stateless authorization rules over a loaded note."""

    @staticmethod
    def require_note(note: Optional[Note]) -> Note:
        if note is None:
            raise NotFoundError("Note not found")
        return note

    @classmethod
    def require_owner(cls, note: Optional[Note], caller_id: int) -> Note:
        note = cls.require_note(note)
        if not note.is_owned_by(caller_id):
            raise ForbiddenError("Access denied. You are not the owner of this note")
        return note

    @staticmethod
    def can_read_content(note: Note, caller_id: int) -> bool:
        """Whether ``caller_id`` may see the description without unlocking."""
        return not note.is_protected or note.is_owned_by(caller_id)

    @classmethod
    def require_readable(cls, note: Optional[Note], caller_id: int) -> Note:
        """Content access without a password: owner, or any caller on an unprotected note."""
        note = cls.require_note(note)
        if not cls.can_read_content(note, caller_id):
            raise ForbiddenError("Access denied - Unlock protected note first")
        return note

    @classmethod
    def verify_unlock(cls, note: Optional[Note], raw_password: Optional[str]) -> Note:
        """Check an unlock attempt. Wrong passwords are authentication failures (401)."""
        if not raw_password:
            raise ValidationError("Password is required")
        note = cls.require_note(note)
        if not note.is_protected:
            raise ValidationError("This note is not protected")
        if not verify_password(raw_password, note.password_hash):
            raise UnauthorizedError("Invalid password")
        return note
