"""Note and data workflow across the encryption boundary.

Write path: validate content -> seal -> validate envelope -> store.
Read path:  load (store validates envelope) -> open -> validate content -> view.

Every operation is scoped to the owning user; a note that belongs to
someone else is reported exactly like a missing one.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from osmnotes.db.store import DataStore, NoteStore, data_store, note_store
from osmnotes.errors import DecryptionError, Issue, RecordNotFoundError, ValidationError
from osmnotes.events import emit
from osmnotes.lifecycle import INITIAL_STATUS, apply_transition
from osmnotes.models.enums import DataSourceType, NoteStatus
from osmnotes.schemas.content import DataContent, DataContentSchema, NoteContent, NoteContentSchema
from osmnotes.schemas.events import EventType, SystemEvent
from osmnotes.schemas.guards import DATA_SOURCE_TYPE_VALUES, is_data_source_type
from osmnotes.schemas.ids import DATA_TABLE, NOTE_TABLE, new_record_id
from osmnotes.schemas.records import DataRecord, DataRecordSchema, NoteRecord, NoteRecordSchema
from osmnotes.schemas.views import (
    DecryptedData,
    DecryptedNote,
    create_decrypted_data,
    create_decrypted_note,
)
from osmnotes.security.encryption import EncryptionService, content_sealer

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


class NoteManager:
    """Stateless note operations — AsyncSession passed per call."""

    def __init__(
        self,
        notes: NoteStore = note_store,
        data: DataStore = data_store,
        sealer: EncryptionService = content_sealer,
    ) -> None:
        self._notes = notes
        self._data = data
        self._sealer = sealer

    # ── Notes ────────────────────────────────────────────────────────

    async def create_note(self, db: AsyncSession, user_id: str, raw_content: Any) -> DecryptedNote:
        """Validate, seal and store a new note in `draft`."""
        content = NoteContentSchema.parse(raw_content)
        note_id = new_record_id(NOTE_TABLE)
        now = _now()
        record = NoteRecordSchema.parse({
            "id": note_id,
            "user_id": user_id,
            "status": INITIAL_STATUS,
            "encrypted_content": self._sealer.seal(content, record_id=note_id),
            "created_at": now,
            "updated_at": now,
        })
        record = await self._notes.put(db, record)

        await emit(SystemEvent(
            event_type=EventType.NOTE_CREATED,
            user_id=user_id,
            note_id=record.id,
            data={"status": record.status.value, "osm_type": content.osm_object.type.value},
            source_module="services.notes",
        ))
        logger.info("Note created: note=%s user=%s", record.id, user_id)
        return create_decrypted_note(record, content)

    async def get_note(self, db: AsyncSession, user_id: str, note_id: str) -> DecryptedNote:
        record = await self._load_note(db, user_id, note_id)
        return create_decrypted_note(record, await self._open_note(record))

    async def list_notes(self, db: AsyncSession, user_id: str) -> list[DecryptedNote]:
        """All of a user's notes, oldest first. One undecryptable note fails the whole list."""
        records = await self._notes.list_for_user(db, user_id)
        return [create_decrypted_note(r, await self._open_note(r)) for r in records]

    async def update_content(
        self,
        db: AsyncSession,
        user_id: str,
        note_id: str,
        raw_content: Any,
    ) -> DecryptedNote:
        """Replace a note's content wholesale. Status is left alone."""
        content = NoteContentSchema.parse(raw_content)
        record = await self._load_note(db, user_id, note_id)
        updated = record.model_copy(update={
            "encrypted_content": self._sealer.seal(content, record_id=record.id),
            "updated_at": _now(),
        })
        updated = await self._notes.conditional_put(
            db,
            updated,
            expected_updated_at=record.updated_at,
            expected_status=record.status,
        )

        await emit(SystemEvent(
            event_type=EventType.NOTE_CONTENT_UPDATED,
            user_id=user_id,
            note_id=record.id,
            source_module="services.notes",
        ))
        return create_decrypted_note(updated, content)

    async def transition(
        self,
        db: AsyncSession,
        user_id: str,
        note_id: str,
        requested: NoteStatus | str,
    ) -> DecryptedNote:
        """Advance a note's status.

        Raises:
            InvalidTransitionError: before anything is written.
            ConflictError: another writer changed the note first.
        """
        record = await self._load_note(db, user_id, note_id)
        updated = apply_transition(record, requested)
        updated = await self._notes.conditional_put(
            db,
            updated,
            expected_updated_at=record.updated_at,
            expected_status=record.status,
        )
        logger.info(
            "Note status transition: %s --> %s (note=%s)",
            record.status.value,
            updated.status.value,
            record.id,
        )

        await emit(SystemEvent(
            event_type=EventType.NOTE_STATUS_CHANGED,
            user_id=user_id,
            note_id=record.id,
            data={"from_status": record.status.value, "to_status": updated.status.value},
            source_module="services.notes",
        ))
        return create_decrypted_note(updated, await self._open_note(updated))

    # ── Data fragments ───────────────────────────────────────────────

    async def add_data(
        self,
        db: AsyncSession,
        user_id: str,
        note_id: str,
        source_type: DataSourceType | str,
        raw_content: Any,
    ) -> DecryptedData:
        """Append a new capture (transcript, OCR text, AI summary, ...) to a note."""
        if not is_data_source_type(source_type):
            raise ValidationError(
                "DataRecord",
                [Issue(
                    path="source_type",
                    constraint="enum",
                    message=f"Input should be one of {sorted(DATA_SOURCE_TYPE_VALUES)}",
                )],
            )
        content = DataContentSchema.parse(raw_content)
        note = await self._load_note(db, user_id, note_id)

        data_id = new_record_id(DATA_TABLE)
        now = _now()
        record = DataRecordSchema.parse({
            "id": data_id,
            "note_id": note.id,
            "source_type": source_type,
            "encrypted_content": self._sealer.seal(content, record_id=data_id),
            "created_at": now,
            "updated_at": now,
        })
        record = await self._data.put(db, record)

        await emit(SystemEvent(
            event_type=EventType.DATA_ADDED,
            user_id=user_id,
            note_id=note.id,
            data={"data_id": record.id, "source_type": record.source_type.value},
            source_module="services.notes",
        ))
        logger.info("Data added: data=%s note=%s source=%s", record.id, note.id, record.source_type.value)
        return create_decrypted_data(record, content)

    async def get_data(self, db: AsyncSession, user_id: str, data_id: str) -> DecryptedData:
        record = await self._load_data(db, user_id, data_id)
        return create_decrypted_data(record, await self._open_data(record))

    async def list_data(self, db: AsyncSession, user_id: str, note_id: str) -> list[DecryptedData]:
        note = await self._load_note(db, user_id, note_id)
        records = await self._data.list_for_note(db, note.id)
        return [create_decrypted_data(r, await self._open_data(r)) for r in records]

    async def correct_data(
        self,
        db: AsyncSession,
        user_id: str,
        data_id: str,
        raw_content: Any,
    ) -> DecryptedData:
        """Corrective edit of an existing fragment (the one in-place overwrite allowed)."""
        content = DataContentSchema.parse(raw_content)
        record = await self._load_data(db, user_id, data_id)
        updated = record.model_copy(update={
            "encrypted_content": self._sealer.seal(content, record_id=record.id),
            "updated_at": _now(),
        })
        updated = await self._data.conditional_put(db, updated, expected_updated_at=record.updated_at)

        await emit(SystemEvent(
            event_type=EventType.DATA_CORRECTED,
            user_id=user_id,
            note_id=record.note_id,
            data={"data_id": record.id},
            source_module="services.notes",
        ))
        return create_decrypted_data(updated, content)

    # ── Internals ────────────────────────────────────────────────────

    async def _load_note(self, db: AsyncSession, user_id: str, note_id: str) -> NoteRecord:
        record = await self._notes.get(db, note_id)
        if record is None or record.user_id != user_id:
            raise RecordNotFoundError(note_id)
        return record

    async def _load_data(self, db: AsyncSession, user_id: str, data_id: str) -> DataRecord:
        record = await self._data.get(db, data_id)
        if record is None:
            raise RecordNotFoundError(data_id)
        note = await self._notes.get(db, record.note_id)
        if note is None or note.user_id != user_id:
            raise RecordNotFoundError(data_id)
        return record

    async def _open_note(self, record: NoteRecord) -> NoteContent:
        payload = await self._open(record.encrypted_content, record.id, note_id=record.id)
        return NoteContentSchema.parse(payload)

    async def _open_data(self, record: DataRecord) -> DataContent:
        payload = await self._open(record.encrypted_content, record.id, note_id=record.note_id)
        return DataContentSchema.parse(payload)

    async def _open(self, blob: bytes, record_id: str, *, note_id: str) -> dict[str, Any]:
        try:
            return self._sealer.open(blob, record_id=record_id)
        except DecryptionError:
            logger.warning("Content unavailable: %s could not be decrypted", record_id)
            await emit(SystemEvent(
                event_type=EventType.CONTENT_DECRYPTION_FAILED,
                note_id=note_id,
                data={"record_id": record_id},
                source_module="services.notes",
            ))
            raise


# Module-level singleton
note_manager = NoteManager()
