"""Domain enums used across SQLAlchemy models and Pydantic schemas.

All enums use str mixin so they serialize (and are stored) as their literal values.
"""

from __future__ import annotations

from enum import Enum


class NoteStatus(str, Enum):
    """Note workflow status — advances draft -> processed -> committed only."""

    DRAFT = "draft"  # user input phase
    PROCESSED = "processed"  # AI analysis completed
    COMMITTED = "committed"  # submitted to OpenStreetMap


class DataSourceType(str, Enum):
    """Where a Data fragment came from."""

    TEXT = "text"  # direct text input
    AUDIO = "audio"  # transcribed from an audio recording
    IMAGE = "image"  # extracted via OCR
    META = "meta"  # AI-generated analysis or metadata


class OsmObjectType(str, Enum):
    """OpenStreetMap element types."""

    NODE = "node"
    WAY = "way"
    RELATION = "relation"

