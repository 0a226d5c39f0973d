# Note and version history models
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel, TimestampMixin

if TYPE_CHECKING:
    from .user import User


TITLE_MAX_LENGTH = 255


class Note(TimestampMixin, BaseModel):
    """A user's note, optionally protected by its own password."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # password_hash is set if and only if is_protected is true
    is_protected: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # bumped by every update and revert; 0 means the initial version still mirrors the note
    revision: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    owner: Mapped["User"] = relationship(
        "User",
        back_populates="notes",
        lazy="raise",
        doc="User who created and owns this note",
    )

    versions: Mapped[List["NoteVersion"]] = relationship(
        "NoteVersion",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
        doc="Snapshots taken before each edit or revert",
    )

    __table_args__ = (
        CheckConstraint(f"length(title) <= {TITLE_MAX_LENGTH}", name="ck_notes_title_len"),
        Index("idx_notes_owner_id", "owner_id"),
        Index("idx_notes_updated_at", "updated_at"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', owner_id={self.owner_id})>"

    def is_owned_by(self, user_id: int) -> bool:
        return self.owner_id == user_id

    @property
    def protection_consistent(self) -> bool:
        """True when the protection flag and the stored hash agree."""
        return bool(self.is_protected) == (self.password_hash is not None)

    def snapshot(self) -> "NoteVersion":
        """Build an unsaved version holding the note's current title and description."""
        return NoteVersion(title=self.title, description=self.description, note_id=self.id)


class NoteVersion(BaseModel):
    """Immutable copy of a note's title and description."""

    __tablename__ = "note_versions"

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    note_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )

    note: Mapped["Note"] = relationship("Note", back_populates="versions", lazy="raise")

    __table_args__ = (
        # SELECT ... WHERE note_id = ? ORDER BY created_at DESC
        Index("idx_note_versions_note_created", "note_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<NoteVersion(id={self.id}, note_id={self.note_id})>"
