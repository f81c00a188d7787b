"""DataFragment model — one capture event (text, audio, image, meta) for a note.

Fragments are append-only from the workflow's point of view; only corrective
edits rewrite `encrypted_content` in place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from osmnotes.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from osmnotes.models.note import Note


class DataFragment(TimestampMixin, Base):
    """Sealed DataContent attached to a note."""

    __tablename__ = "data"
    __table_args__ = (
        CheckConstraint("source_type IN ('text', 'audio', 'image', 'meta')", name="ck_data_source_type"),
    )

    # Foreign keys
    note_id: Mapped[str] = mapped_column(
        String(80), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True
    )

    source_type: Mapped[str] = mapped_column(String(20), nullable=False, comment="DataSourceType enum value")

    # AES-256-GCM sealed DataContent
    encrypted_content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    # Relationships
    note: Mapped[Note] = relationship("Note", back_populates="data_fragments", lazy="raise")

    def __repr__(self) -> str:
        return f"<DataFragment id={self.id} note={self.note_id} source={self.source_type}>"
