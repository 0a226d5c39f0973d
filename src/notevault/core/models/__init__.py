"""
Database models for NoteVault.

SQLAlchemy ORM models defining the schema:
    - User: account identified by a unique email
    - Note: note content with optional password protection
    - NoteVersion: append-only snapshots of a note's title and description
"""

from .base import BaseModel
from .note import Note, NoteVersion
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
    "NoteVersion",
]
