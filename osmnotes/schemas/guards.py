"""Type guards for the closed enums.

Built from the same enums the schemas validate against, so a guard and its
schema cannot disagree.
"""

from __future__ import annotations

from typing import TypeGuard

from osmnotes.models.enums import DataSourceType, NoteStatus, OsmObjectType

NOTE_STATUS_VALUES: frozenset[str] = frozenset(s.value for s in NoteStatus)
DATA_SOURCE_TYPE_VALUES: frozenset[str] = frozenset(s.value for s in DataSourceType)
OSM_OBJECT_TYPE_VALUES: frozenset[str] = frozenset(t.value for t in OsmObjectType)


def is_note_status(value: object) -> TypeGuard[str]:
    """Check if a value is a valid note status."""
    return isinstance(value, str) and value in NOTE_STATUS_VALUES


def is_data_source_type(value: object) -> TypeGuard[str]:
    """Check if a value is a valid data source type."""
    return isinstance(value, str) and value in DATA_SOURCE_TYPE_VALUES


def is_osm_object_type(value: object) -> TypeGuard[str]:
    """Check if a value is a valid OSM object type."""
    return isinstance(value, str) and value in OSM_OBJECT_TYPE_VALUES
