"""Audit log subscriber, persists every SystemEvent to the audit_log table.

Registered as a global subscriber from osmnotes.main.lifespan. Failures are
logged and never propagate to the event system.
"""

from __future__ import annotations

import logging

from osmnotes.db.engine import async_session_factory
from osmnotes.models.audit import AuditLog
from osmnotes.schemas.events import SystemEvent
from osmnotes.schemas.ids import AUDIT_TABLE, record_id

logger = logging.getLogger(__name__)


async def audit_on_event(event: SystemEvent) -> None:
    """Write a SystemEvent to the audit_log table."""
    try:
        async with async_session_factory() as db:
            audit = AuditLog(
                id=record_id(AUDIT_TABLE, event.id.hex),
                event_type=event.event_type.value,
                source_module=event.source_module,
                user_id=event.user_id,
                note_id=event.note_id,
                data=dict(event.data),
                created_at=event.timestamp,
                updated_at=event.timestamp,
            )
            db.add(audit)
            await db.commit()
    except Exception:
        logger.exception(
            "Failed to persist audit event: %s (note=%s)",
            event.event_type.value,
            event.note_id,
        )
