"""Decrypted views — a record with its sealed field swapped for opened content.

Views live in memory only. The `kind` tag is fixed per class, so a view can
never be validated as the record it came from (and vice versa), and code
holding a view can assert what it has at runtime.
"""

from __future__ import annotations

from typing import Literal

from osmnotes.models.enums import DataSourceType, NoteStatus
from osmnotes.schemas.content import DataContent, NoteContent
from osmnotes.schemas.records import DataRecord, NoteRecord
from osmnotes.schemas.types import FrozenSchema, Instant, Text


class DecryptedNote(FrozenSchema):
    """NoteRecord minus encrypted_content, plus its NoteContent."""

    kind: Literal["decrypted_note"] = "decrypted_note"
    id: Text
    user_id: Text
    status: NoteStatus
    created_at: Instant
    updated_at: Instant
    content: NoteContent


class DecryptedData(FrozenSchema):
    """DataRecord minus encrypted_content, plus its DataContent."""

    kind: Literal["decrypted_data"] = "decrypted_data"
    id: Text
    note_id: Text
    source_type: DataSourceType
    created_at: Instant
    updated_at: Instant
    content: DataContent


def create_decrypted_note(record: NoteRecord, content: NoteContent) -> DecryptedNote:
    """Merge an already-validated record and content. No validation is re-run."""
    return DecryptedNote.model_construct(
        **record.model_dump(exclude={"encrypted_content"}),
        content=content.model_copy(deep=True),
    )


def create_decrypted_data(record: DataRecord, content: DataContent) -> DecryptedData:
    """Merge an already-validated record and content. No validation is re-run."""
    return DecryptedData.model_construct(
        **record.model_dump(exclude={"encrypted_content"}),
        content=content.model_copy(deep=True),
    )
