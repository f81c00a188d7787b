"""Note lifecycle state machine.

Holds no data: `can_transition` answers whether a move is legal and
`apply_transition` returns a new NoteRecord without touching the old one.
Serialising concurrent transitions on one note is the store's job
(conditional write on status + updated_at).
"""

from __future__ import annotations

from datetime import UTC, datetime

from osmnotes.errors import InvalidTransitionError
from osmnotes.lifecycle.states import TERMINAL_STATUSES, TRANSITIONS
from osmnotes.models.enums import NoteStatus
from osmnotes.schemas.guards import is_note_status
from osmnotes.schemas.records import NoteRecord


def _as_status(value: NoteStatus | str) -> NoteStatus | None:
    if isinstance(value, NoteStatus):
        return value
    if is_note_status(value):
        return NoteStatus(value)
    return None


def can_transition(current: NoteStatus | str, requested: NoteStatus | str) -> bool:
    """Check if `requested` directly follows `current`. Unknown statuses are never valid."""
    cur = _as_status(current)
    req = _as_status(requested)
    if cur is None or req is None:
        return False
    return req in TRANSITIONS[cur]


def next_status(current: NoteStatus | str) -> NoteStatus | None:
    """Return the single status reachable from `current`, or None when terminal."""
    cur = _as_status(current)
    if cur is None:
        msg = f"Unknown note status: {current!r}"
        raise ValueError(msg)
    targets = TRANSITIONS[cur]
    return next(iter(targets)) if targets else None


def is_terminal(status: NoteStatus | str) -> bool:
    """Check if no transition leaves `status`."""
    return _as_status(status) in TERMINAL_STATUSES


def apply_transition(
    record: NoteRecord,
    requested: NoteStatus | str,
    *,
    now: datetime | None = None,
) -> NoteRecord:
    """Return a copy of `record` moved to `requested` with updated_at refreshed.

    Raises:
        InvalidTransitionError: if the move is not allowed; `record` is untouched.
    """
    if not can_transition(record.status, requested):
        raise InvalidTransitionError(record.status, requested)

    new_status = NoteStatus(requested)
    stamped = now if now is not None else datetime.now(UTC)
    if stamped.tzinfo is None:
        msg = "Transition timestamp must be timezone-aware"
        raise ValueError(msg)

    return record.model_copy(update={"status": new_status, "updated_at": stamped})
