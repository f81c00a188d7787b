"""Shared fixtures: in-memory stores standing in for the database."""

from __future__ import annotations

import os
from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from osmnotes.errors import ConflictError
from osmnotes.models.enums import NoteStatus
from osmnotes.schemas.records import DataRecordSchema, NoteRecordSchema, UserRecordSchema
from osmnotes.security.encryption import ContentSealer
from osmnotes.security.passwords import PasswordHasher


class MemoryStore:
    """Dict-backed RecordStore with the same validation and CAS behaviour."""

    def __init__(self, schema) -> None:
        self._schema = schema
        self.rows: dict[str, object] = {}

    async def get(self, db, record_id):
        return self.rows.get(record_id)

    async def put(self, db, record):
        checked = self._schema.parse(record.model_dump() if hasattr(record, "model_dump") else record)
        self.rows[checked.id] = checked
        return checked

    async def conditional_put(self, db, record, *, expected_updated_at, expected_status=None):
        checked = self._schema.parse(record.model_dump())
        current = self.rows.get(checked.id)
        if current is None or current.updated_at != expected_updated_at:
            msg = f"{checked.id} was modified concurrently"
            raise ConflictError(msg)
        if expected_status is not None and current.status != NoteStatus(expected_status):
            msg = f"{checked.id} was modified concurrently"
            raise ConflictError(msg)
        self.rows[checked.id] = checked
        return checked


class MemoryUserStore(MemoryStore):
    async def get_by_osm_id(self, db, osm_id):
        return next((u for u in self.rows.values() if u.osm_id == osm_id), None)


class MemoryNoteStore(MemoryStore):
    async def list_for_user(self, db, user_id):
        return sorted(
            (n for n in self.rows.values() if n.user_id == user_id),
            key=lambda n: (n.created_at, n.id),
        )


class MemoryDataStore(MemoryStore):
    async def list_for_note(self, db, note_id):
        return sorted(
            (d for d in self.rows.values() if d.note_id == note_id),
            key=lambda d: (d.created_at, d.id),
        )


@pytest.fixture
def db():
    """Mock AsyncSession; the memory stores never touch it."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def user_store() -> MemoryUserStore:
    return MemoryUserStore(UserRecordSchema)


@pytest.fixture
def note_store() -> MemoryNoteStore:
    return MemoryNoteStore(NoteRecordSchema)


@pytest.fixture
def data_store() -> MemoryDataStore:
    return MemoryDataStore(DataRecordSchema)


@pytest.fixture
def sealer() -> ContentSealer:
    return ContentSealer(os.urandom(32))


@pytest.fixture
def hasher() -> PasswordHasher:
    """Cheap cost parameters so the suite stays fast."""
    return PasswordHasher(namespace="osm_notes", iterations=1_000, scrypt_n=16, scrypt_r=8, scrypt_p=1)


@pytest.fixture
def mock_emit() -> Iterator[AsyncMock]:
    """Capture events emitted by the services."""
    emitter = AsyncMock()
    with (
        patch("osmnotes.services.auth.emit", emitter),
        patch("osmnotes.services.notes.emit", emitter),
    ):
        yield emitter
