"""Note status transition map.

draft -> processed -> committed. No skipping, no going back, no
self-transitions, nothing leaves committed.
"""

from __future__ import annotations

from osmnotes.models.enums import NoteStatus

INITIAL_STATUS: NoteStatus = NoteStatus.DRAFT

# Transition map: {current_status: allowed next statuses}
TRANSITIONS: dict[NoteStatus, frozenset[NoteStatus]] = {
    NoteStatus.DRAFT: frozenset({NoteStatus.PROCESSED}),
    NoteStatus.PROCESSED: frozenset({NoteStatus.COMMITTED}),
    NoteStatus.COMMITTED: frozenset(),
}

TERMINAL_STATUSES: frozenset[NoteStatus] = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)
