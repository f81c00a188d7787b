"""Tests for the audit log subscriber."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from osmnotes.models.audit import AuditLog
from osmnotes.schemas.events import EventType, SystemEvent
from osmnotes.security.audit import audit_on_event


def _make_session() -> MagicMock:
    db = MagicMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    return db


def _make_factory(db: MagicMock) -> MagicMock:
    @asynccontextmanager
    async def session():
        yield db

    return MagicMock(side_effect=session)


class TestAuditOnEvent:
    @pytest.mark.asyncio
    async def test_persists_event(self):
        db = _make_session()
        event = SystemEvent(
            event_type=EventType.NOTE_STATUS_CHANGED,
            user_id="user:alice",
            note_id="note:1",
            data={"old_status": "draft", "new_status": "processed"},
            source_module="notes",
        )

        with patch("osmnotes.security.audit.async_session_factory", _make_factory(db)):
            await audit_on_event(event)

        db.add.assert_called_once()
        row = db.add.call_args.args[0]
        assert isinstance(row, AuditLog)
        assert row.id == f"audit:{event.id.hex}"
        assert row.event_type == "note.status_changed"
        assert row.user_id == "user:alice"
        assert row.note_id == "note:1"
        assert row.source_module == "notes"
        assert row.data == {"old_status": "draft", "new_status": "processed"}
        assert row.created_at == event.timestamp
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_system_event_without_ids(self):
        db = _make_session()

        with patch("osmnotes.security.audit.async_session_factory", _make_factory(db)):
            await audit_on_event(SystemEvent(event_type=EventType.SYSTEM_STARTUP, source_module="main"))

        row = db.add.call_args.args[0]
        assert row.user_id is None
        assert row.note_id is None
        assert row.data == {}

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, caplog):
        db = _make_session()
        db.commit.side_effect = RuntimeError("database is down")

        with (
            caplog.at_level(logging.ERROR, logger="osmnotes.security.audit"),
            patch("osmnotes.security.audit.async_session_factory", _make_factory(db)),
        ):
            await audit_on_event(SystemEvent(event_type=EventType.DATA_ADDED, note_id="note:1"))

        assert "Failed to persist audit event: data.added (note=note:1)" in caplog.text
