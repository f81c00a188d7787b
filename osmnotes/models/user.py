"""User model — one row per authenticated OSM identity.

`osm_id` is the external unique key; signup races are settled by the unique
index, not by application code.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from osmnotes.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from osmnotes.models.note import Note


class User(TimestampMixin, Base):
    """An OSM contributor using the notes app."""

    __tablename__ = "users"

    osm_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False, comment="Scrypt hash of PBKDF2-derived password")
    encrypted_openai_key: Mapped[bytes | None] = mapped_column(LargeBinary, comment="Client-sealed OpenAI key")
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Relationships
    notes: Mapped[list[Note]] = relationship(
        "Note", back_populates="user", lazy="raise", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} osm_id={self.osm_id}>"
