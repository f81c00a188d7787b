"""Application lifespan — wires logging, database and events together.

Usage:
    from osmnotes.main import lifespan

    async with lifespan():
        async for db in get_session():
            await note_manager.create_note(db, user_id, raw)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from osmnotes.config import settings
from osmnotes.db.engine import db_lifespan
from osmnotes.events import emit, start_event_system, stop_event_system, subscribe, unsubscribe
from osmnotes.log_setup import configure_logging
from osmnotes.schemas.events import EventType, SystemEvent
from osmnotes.security.audit import audit_on_event

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan() -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    configure_logging(settings.log_level)
    logger.info("Starting osmnotes (env=%s)", settings.environment)

    # 1. Database
    async with db_lifespan():
        logger.info("Database initialized")

        # 2. Audit logging (global subscriber)
        subscribe(audit_on_event)
        logger.info("Audit logging subscriber registered")

        # 3. Event system
        await start_event_system()
        await emit(SystemEvent(event_type=EventType.SYSTEM_STARTUP, source_module="main"))

        try:
            yield
        finally:
            logger.info("Shutting down osmnotes...")
            await emit(SystemEvent(event_type=EventType.SYSTEM_SHUTDOWN, source_module="main"))
            await stop_event_system()
            unsubscribe(audit_on_event)

    logger.info("osmnotes shutdown complete")
