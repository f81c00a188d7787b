"""Note model — one survey observation, sealed NoteContent plus workflow status."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from osmnotes.models.base import Base, TimestampMixin
from osmnotes.models.enums import NoteStatus

if TYPE_CHECKING:
    from osmnotes.models.data import DataFragment
    from osmnotes.models.user import User


class Note(TimestampMixin, Base):
    """A note owned by exactly one user."""

    __tablename__ = "notes"
    __table_args__ = (
        CheckConstraint("status IN ('draft', 'processed', 'committed')", name="ck_notes_status"),
    )

    # Foreign keys
    user_id: Mapped[str] = mapped_column(
        String(80), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Lifecycle
    status: Mapped[str] = mapped_column(String(20), default=NoteStatus.DRAFT.value, nullable=False)

    # AES-256-GCM sealed NoteContent
    encrypted_content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    # Relationships
    user: Mapped[User] = relationship("User", back_populates="notes", lazy="raise")
    data_fragments: Mapped[list[DataFragment]] = relationship(
        "DataFragment", back_populates="note", lazy="raise", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Note id={self.id} user={self.user_id} status={self.status}>"
