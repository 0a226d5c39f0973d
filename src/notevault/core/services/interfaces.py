"""
Service interfaces for NoteVault.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.user import User
from ..schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    UserResponse,
    UserUpdateRequest,
)
from ..schemas.notes import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    VersionEntry,
)


class IAuthService(ABC):
    """Registration, login and profile management."""

    @abstractmethod
    async def register_user(self, request: RegisterRequest) -> User:
        """Register new user."""

    @abstractmethod
    async def authenticate_user(self, request: LoginRequest) -> User:
        """Check credentials and return the user."""

    @abstractmethod
    async def logout_user(self, access_token: Optional[str]) -> bool:
        """Invalidate the presented token."""

    @abstractmethod
    async def get_current_user(self, user_id: int) -> UserResponse:
        """Get user by ID."""

    @abstractmethod
    async def update_user_profile(self, user_id: int, request: UserUpdateRequest) -> UserResponse:
        """Update name and/or email."""

    @abstractmethod
    async def change_password(self, user_id: int, request: PasswordChangeRequest) -> bool:
        """Change user password."""


class INoteService(ABC):
    """Note CRUD with version history and password protection."""

    @abstractmethod
    async def create_note(self, user_id: int, request: NoteCreate) -> NoteResponse:
        """Create a note and its initial version."""

    @abstractmethod
    async def get_note(self, note_id: int, user_id: int) -> NoteResponse:
        """Read a note, withholding protected content from non-owners."""

    @abstractmethod
    async def list_notes(self, page: int = 1, per_page: int = 20) -> NoteListResponse:
        """List note metadata."""

    @abstractmethod
    async def update_note(self, note_id: int, user_id: int, request: NoteUpdate) -> NoteResponse:
        """Snapshot then patch a note."""

    @abstractmethod
    async def delete_note(self, note_id: int, user_id: int) -> None:
        """Delete a note with its history."""

    @abstractmethod
    async def list_versions(self, note_id: int, user_id: int) -> List[VersionEntry]:
        """Current state followed by history, newest first."""

    @abstractmethod
    async def revert_note(self, note_id: int, user_id: int, version_id: int) -> NoteResponse:
        """Restore a previous version."""

    @abstractmethod
    async def unlock_note(self, note_id: int, user_id: int, password: Optional[str]) -> NoteResponse:
        """Return a protected note's content given its password."""
