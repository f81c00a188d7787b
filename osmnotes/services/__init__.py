"""Application services — auth and note workflow."""

from osmnotes.services.auth import AuthManager, auth_manager
from osmnotes.services.notes import NoteManager, note_manager

__all__ = ["AuthManager", "NoteManager", "auth_manager", "note_manager"]
