"""SQLAlchemy ORM models for osmnotes.

Import all models here so Alembic and Base.metadata.create_all() discover them.
"""

from __future__ import annotations

from osmnotes.models.audit import AuditLog
from osmnotes.models.base import Base
from osmnotes.models.data import DataFragment
from osmnotes.models.enums import DataSourceType, NoteStatus, OsmObjectType
from osmnotes.models.note import Note
from osmnotes.models.user import User

__all__ = [
    # Base
    "Base",
    # Models
    "User",
    "Note",
    "DataFragment",
    "AuditLog",
    # Enums
    "NoteStatus",
    "DataSourceType",
    "OsmObjectType",
]
