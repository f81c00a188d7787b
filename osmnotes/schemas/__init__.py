"""Schemas for everything crossing the encryption boundary.

Schema singletons are immutable and built once at import time.
"""

from __future__ import annotations

from osmnotes.schemas.auth import SigninParams, SigninParamsSchema, SignupParams, SignupParamsSchema
from osmnotes.schemas.content import (
    DataContent,
    DataContentSchema,
    NoteContent,
    NoteContentSchema,
    parse_data_content,
    parse_note_content,
)
from osmnotes.schemas.guards import is_data_source_type, is_note_status, is_osm_object_type
from osmnotes.schemas.ids import RecordId, new_record_id, record_id, record_table
from osmnotes.schemas.parsing import ParseFailure, ParseResult, ParseSuccess, Schema
from osmnotes.schemas.records import (
    DataRecord,
    DataRecordSchema,
    NoteRecord,
    NoteRecordSchema,
    UserRecord,
    UserRecordSchema,
    parse_data_record,
    parse_note_record,
    parse_user_record,
)
from osmnotes.schemas.values import (
    Location,
    LocationSchema,
    OsmObject,
    OsmObjectSchema,
    ProcessingMeta,
    ProcessingMetaSchema,
)
from osmnotes.schemas.views import (
    DecryptedData,
    DecryptedNote,
    create_decrypted_data,
    create_decrypted_note,
)

__all__ = [
    # Parsing
    "Schema",
    "ParseResult",
    "ParseSuccess",
    "ParseFailure",
    # Ids
    "RecordId",
    "record_id",
    "new_record_id",
    "record_table",
    # Values
    "Location",
    "LocationSchema",
    "OsmObject",
    "OsmObjectSchema",
    "ProcessingMeta",
    "ProcessingMetaSchema",
    # Content
    "NoteContent",
    "NoteContentSchema",
    "DataContent",
    "DataContentSchema",
    "parse_note_content",
    "parse_data_content",
    # Records
    "UserRecord",
    "UserRecordSchema",
    "NoteRecord",
    "NoteRecordSchema",
    "DataRecord",
    "DataRecordSchema",
    "parse_user_record",
    "parse_note_record",
    "parse_data_record",
    # Auth
    "SignupParams",
    "SignupParamsSchema",
    "SigninParams",
    "SigninParamsSchema",
    # Views
    "DecryptedNote",
    "DecryptedData",
    "create_decrypted_note",
    "create_decrypted_data",
    # Guards
    "is_note_status",
    "is_data_source_type",
    "is_osm_object_type",
]
