"""Record schemas — the persisted envelopes.

Only the envelope is checked here. `encrypted_content` must be a non-empty
byte sequence; whether it decrypts to valid content is the content schema's
job after the encryption service opens it.

`UserRecord.last_login_at` is the one field that must be present yet may be
null: a user who has just signed up has never logged in.
"""

from __future__ import annotations

from typing import Any

from osmnotes.models.enums import DataSourceType, NoteStatus
from osmnotes.schemas.parsing import Schema
from osmnotes.schemas.types import FrozenSchema, Instant, OsmId, RecordKey, SealedBytes, StoredHash


class UserRecord(FrozenSchema):
    """Row of the users table."""

    id: RecordKey
    osm_id: OsmId
    password: StoredHash  # stored hash of the derived password, opaque here
    encrypted_openai_key: SealedBytes | None = None
    created_at: Instant
    last_login_at: Instant | None


class NoteRecord(FrozenSchema):
    """Row of the notes table."""

    id: RecordKey
    user_id: RecordKey
    status: NoteStatus
    encrypted_content: SealedBytes
    created_at: Instant
    updated_at: Instant


class DataRecord(FrozenSchema):
    """Row of the data table."""

    id: RecordKey
    note_id: RecordKey
    source_type: DataSourceType
    encrypted_content: SealedBytes
    created_at: Instant
    updated_at: Instant


UserRecordSchema: Schema[UserRecord] = Schema(UserRecord)
NoteRecordSchema: Schema[NoteRecord] = Schema(NoteRecord)
DataRecordSchema: Schema[DataRecord] = Schema(DataRecord)


def parse_user_record(data: Any) -> UserRecord:
    """Validate and parse a user record."""
    return UserRecordSchema.parse(data)


def parse_note_record(data: Any) -> NoteRecord:
    """Validate and parse a note record."""
    return NoteRecordSchema.parse(data)


def parse_data_record(data: Any) -> DataRecord:
    """Validate and parse a data record."""
    return DataRecordSchema.parse(data)
