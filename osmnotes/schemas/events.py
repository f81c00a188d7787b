"""SystemEvent schema — what the services announce after each state change.

Event payloads carry ids, statuses and sizes only. Plaintext note or data
content never goes into `data`.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """All event types emitted by osmnotes."""

    # Users
    USER_SIGNED_UP = "user.signed_up"
    USER_SIGNED_IN = "user.signed_in"
    USER_SIGNIN_FAILED = "user.signin_failed"

    # Notes
    NOTE_CREATED = "note.created"
    NOTE_CONTENT_UPDATED = "note.content_updated"
    NOTE_STATUS_CHANGED = "note.status_changed"

    # Data fragments
    DATA_ADDED = "data.added"
    DATA_CORRECTED = "data.corrected"

    # Encryption boundary
    CONTENT_DECRYPTION_FAILED = "content.decryption_failed"

    # System
    SYSTEM_STARTUP = "system.startup"
    SYSTEM_SHUTDOWN = "system.shutdown"


class SystemEvent(BaseModel):
    """Immutable event record handed to every matching subscriber."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Context (optional; system events have neither)
    user_id: str | None = None
    note_id: str | None = None

    # Flexible payload
    data: dict[str, Any] = Field(default_factory=dict)

    source_module: str | None = Field(default=None, description="Module that emitted this event")
