"""Async database engine, session factory, and lifespan management.

Uses SQLAlchemy 2.0 async with the asyncpg driver for PostgreSQL.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from osmnotes.config import settings

logger = logging.getLogger(__name__)

# ── Async PostgreSQL engine ──────────────────────────────────────────

engine: AsyncEngine = create_async_engine(
    settings.db.database_url,
    echo=False,
    pool_size=10,
    max_overflow=20,
    pool_pre_ping=True,
    pool_recycle=3600,
)

# ── Session factory ──────────────────────────────────────────────────

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session that commits on success and rolls back on any error.

    Usage:
        async for db in get_session():
            await note_manager.create_note(db, user_id, raw)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ── Lifespan helpers ─────────────────────────────────────────────────


async def init_db() -> None:
    """Verify connectivity; outside production also create missing tables.

    In production, tables are created via Alembic migrations.
    """
    # Import here to ensure all models are registered with Base.metadata
    from osmnotes.models import Base

    async with engine.begin() as conn:
        if not settings.is_production:
            await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready (create_all=%s)", not settings.is_production)


async def close_db() -> None:
    """Dispose the engine's connection pool."""
    await engine.dispose()


@contextlib.asynccontextmanager
async def db_lifespan() -> AsyncGenerator[None, None]:
    """Context manager for database lifecycle."""
    await init_db()
    try:
        yield
    finally:
        await close_db()
