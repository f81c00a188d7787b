"""AuditLog model, an append-only trail of every SystemEvent.

Rows only carry event type, ids and the event's `data` dict. Note and
data payloads never reach this table because events never carry them.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from osmnotes.models.base import Base, TimestampMixin


class AuditLog(TimestampMixin, Base):
    """Immutable audit trail entry."""

    __tablename__ = "audit_log"

    event_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    source_module: Mapped[str | None] = mapped_column(String(100))

    # No foreign keys: audit rows outlive the users and notes they mention
    user_id: Mapped[str | None] = mapped_column(String(80), index=True)
    note_id: Mapped[str | None] = mapped_column(String(80), index=True)

    data: Mapped[dict[str, Any] | None] = mapped_column(JSONB)

    def __repr__(self) -> str:
        return f"<AuditLog event={self.event_type} note={self.note_id}>"
