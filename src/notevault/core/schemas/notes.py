"""
Note management schemas.

These schemas define the API contracts for note CRUD operations,
protection (unlock) and version history.
"""

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import ConfigDict, Field, field_validator

from ..models.note import TITLE_MAX_LENGTH
from .common import APIModel, PaginationResponse


def _not_blank(value: Optional[str], field: str) -> Optional[str]:
    if value is not None and len(value.strip()) == 0:
        raise ValueError(f"{field} cannot be empty")
    return value


class NoteCreate(APIModel):
    """Note creation request schema."""

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH, description="Note title")
    description: str = Field(min_length=1, description="Note content")
    is_protected: bool = Field(default=False, description="Require a password to read the content")
    password: Optional[str] = Field(default=None, description="Note password, required when protected")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _not_blank(v, "Title").strip()

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _not_blank(v, "Description")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Meeting Notes - Q4 Planning",
                "description": "1. Review Q3 performance\n2. Set Q4 objectives",
                "isProtected": True,
                "password": "secret1A!",
            }
        }
    )


class NoteUpdate(APIModel):
    """Partial note update.

    Fields left out of the body keep their stored value; the service reads
    ``model_fields_set`` to tell an omitted field from one sent as ``null``.
    """

    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH, description="Note title")
    description: Optional[str] = Field(default=None, description="Note content")
    is_protected: Optional[bool] = Field(default=None, description="Protection flag")
    password: Optional[str] = Field(default=None, description="New note password")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        v = _not_blank(v, "Title")
        return v.strip() if v is not None else v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _not_blank(v, "Description")

    def provided(self, field: str) -> bool:
        """True when the client sent ``field``, even as null."""
        return field in self.model_fields_set

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Updated Meeting Notes - Q4 Planning",
                "isProtected": False,
            }
        }
    )


class UnlockRequest(APIModel):
    password: Optional[str] = Field(default=None, description="Note password")


class RevertRequest(APIModel):
    version_id: int = Field(description="Persisted version to restore")


class OwnerSummary(APIModel):
    id: int
    name: str
    email: str


class NoteResponse(APIModel):
    """Note response schema. The password hash is never part of it."""

    id: int = Field(description="Note identifier")
    title: str = Field(description="Note title")
    description: Optional[str] = Field(description="Note content, null while locked")
    is_protected: bool = Field(description="Whether the note is password protected")
    needs_password: bool = Field(default=False, description="Content withheld until unlocked")

    owner_id: int = Field(description="Note owner ID")
    owner: Optional[OwnerSummary] = Field(default=None, description="Note owner")

    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 42,
                "title": "Meeting Notes - Q4 Planning",
                "description": None,
                "isProtected": True,
                "needsPassword": True,
                "ownerId": 7,
                "owner": {"id": 7, "name": "Ada Lovelace", "email": "ada@example.com"},
                "createdAt": "2025-09-13T10:30:00Z",
                "updatedAt": "2025-09-13T11:00:00Z",
            }
        }
    )


class NoteListItem(APIModel):
    """Note metadata for list views, without content."""

    id: int
    title: str
    is_protected: bool
    owner_id: int
    owner: Optional[OwnerSummary] = None
    created_at: datetime
    updated_at: datetime


class NoteListResponse(PaginationResponse[NoteListItem]):
    """Paginated note list response."""


class NoteVersionResponse(APIModel):
    """A persisted snapshot."""

    id: int
    note_id: int
    title: str
    description: str
    created_at: datetime
    is_current: Literal[False] = False


class CurrentVersionResponse(APIModel):
    """The live note presented at the head of the version list; never stored."""

    id: Literal["current"] = "current"
    note_id: int
    title: str
    description: str
    created_at: datetime = Field(description="The note's last update time")
    is_current: Literal[True] = True


VersionEntry = Union[CurrentVersionResponse, NoteVersionResponse]
