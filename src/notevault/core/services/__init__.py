"""
Service layer: business rules over the repositories.

Services own the transaction boundary; repositories only flush.
"""

from .access_guard import AccessGuard
from .auth_service import AuthService
from .interfaces import IAuthService, INoteService
from .note_service import NoteService

__all__ = [
    # Interfaces
    "IAuthService",
    "INoteService",

    # Implementations
    "AccessGuard",
    "AuthService",
    "NoteService",
]
