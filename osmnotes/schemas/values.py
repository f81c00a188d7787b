"""Value schemas — atomic pieces of a decrypted payload."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from osmnotes.models.enums import OsmObjectType
from osmnotes.schemas.parsing import Schema
from osmnotes.schemas.types import (
    FrozenSchema,
    Instant,
    Latitude,
    Longitude,
    NonEmptyText,
    PositiveInt,
    Text,
    reject_null,
)


class Location(FrozenSchema):
    """WGS84 coordinates, bounds inclusive."""

    lat: Latitude
    lng: Longitude


class OsmObject(FrozenSchema):
    """Reference to the OSM element an observation concerns."""

    type: OsmObjectType
    id: NonEmptyText
    version: PositiveInt | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _version_not_null(cls, value: Any) -> Any:
        return reject_null(value)


class ProcessingMeta(FrozenSchema):
    """Provenance of an AI-derived fragment. Every field may be omitted, none may be null."""

    api_model: Text | None = None
    processing_time: Instant | None = None
    original_filename: Text | None = None

    @field_validator("api_model", "processing_time", "original_filename", mode="before")
    @classmethod
    def _omitted_not_null(cls, value: Any) -> Any:
        return reject_null(value)


LocationSchema: Schema[Location] = Schema(Location)
OsmObjectSchema: Schema[OsmObject] = Schema(OsmObject)
ProcessingMetaSchema: Schema[ProcessingMeta] = Schema(ProcessingMeta)
