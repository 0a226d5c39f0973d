"""
Pydantic schemas for validating and documenting API requests and responses.
"""

from .auth import (
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from .common import ErrorResponse, HealthCheckResponse, PaginationResponse, SuccessResponse
from .notes import (
    CurrentVersionResponse,
    NoteCreate,
    NoteListItem,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    NoteVersionResponse,
    OwnerSummary,
    RevertRequest,
    UnlockRequest,
    VersionEntry,
)

__all__ = [
    # Auth schemas
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserResponse",
    "UserUpdateRequest",
    "PasswordChangeRequest",
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteListItem",
    "NoteListResponse",
    "OwnerSummary",
    "UnlockRequest",
    "RevertRequest",
    "NoteVersionResponse",
    "CurrentVersionResponse",
    "VersionEntry",
    # Common schemas
    "PaginationResponse",
    "ErrorResponse",
    "SuccessResponse",
    "HealthCheckResponse",
]
