"""Content schemas — the two payload kinds sealed into encrypted_content.

These are the last checks before plaintext disappears into ciphertext, and
the first checks after it comes back out.
"""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from osmnotes.schemas.parsing import Schema
from osmnotes.schemas.types import Confidence, FrozenSchema, NonEmptyText, Text, reject_null
from osmnotes.schemas.values import Location, OsmObject, ProcessingMeta


class NoteContent(FrozenSchema):
    """Decrypted payload of a Note."""

    osm_object: OsmObject
    location: Location
    title: NonEmptyText


class DataContent(FrozenSchema):
    """Decrypted payload of a Data fragment. `content` may be empty (e.g. silent audio)."""

    content: Text
    confidence: Confidence | None = None
    processing_meta: ProcessingMeta | None = None

    @field_validator("confidence", "processing_meta", mode="before")
    @classmethod
    def _omitted_not_null(cls, value: Any) -> Any:
        return reject_null(value)


NoteContentSchema: Schema[NoteContent] = Schema(NoteContent)
DataContentSchema: Schema[DataContent] = Schema(DataContent)


def parse_note_content(data: Any) -> NoteContent:
    """Validate and parse decrypted note content."""
    return NoteContentSchema.parse(data)


def parse_data_content(data: Any) -> DataContent:
    """Validate and parse decrypted data content."""
    return DataContentSchema.parse(data)
