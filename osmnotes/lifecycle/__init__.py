"""Note lifecycle: draft -> processed -> committed."""

from osmnotes.lifecycle.machine import apply_transition, can_transition, is_terminal, next_status
from osmnotes.lifecycle.states import INITIAL_STATUS, TERMINAL_STATUSES, TRANSITIONS

__all__ = [
    "INITIAL_STATUS",
    "TERMINAL_STATUSES",
    "TRANSITIONS",
    "apply_transition",
    "can_transition",
    "is_terminal",
    "next_status",
]
