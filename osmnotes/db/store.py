"""Record stores — the persistence boundary.

Every row read is run through its record schema before anyone sees it, and
every record is re-validated before it is written. Driver errors are wrapped
into StorageError (ConflictError for constraint violations) and otherwise
left uninterpreted.

Stores are stateless; the AsyncSession is passed per call and the caller
owns commit/rollback.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterator, Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from osmnotes.errors import ConflictError, StorageError
from osmnotes.models.data import DataFragment
from osmnotes.models.enums import NoteStatus
from osmnotes.models.note import Note
from osmnotes.models.user import User
from osmnotes.schemas.parsing import Schema
from osmnotes.schemas.records import (
    DataRecord,
    DataRecordSchema,
    NoteRecord,
    NoteRecordSchema,
    UserRecord,
    UserRecordSchema,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


@contextlib.contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into the osmnotes storage errors."""
    try:
        yield
    except IntegrityError as exc:
        msg = f"{action}: constraint violated"
        raise ConflictError(msg) from exc
    except SQLAlchemyError as exc:
        msg = f"{action} failed"
        raise StorageError(msg) from exc


class RecordStore(Generic[R]):
    """get / put / conditional_put for one table."""

    def __init__(self, orm_model: type[Any], schema: Schema[R]) -> None:
        self._orm = orm_model
        self._schema = schema

    @property
    def table(self) -> str:
        return self._orm.__tablename__

    # ── Reads ────────────────────────────────────────────────────────

    async def get(self, db: AsyncSession, record_id: str) -> R | None:
        """Load and validate one record; None when absent."""
        with storage_errors(f"Loading {record_id}"):
            row = await db.get(self._orm, record_id)
        if row is None:
            return None
        return self._from_row(row)

    async def _select(self, db: AsyncSession, stmt: Any) -> list[R]:
        with storage_errors(f"Querying {self.table}"):
            result = await db.execute(stmt)
            rows = result.scalars().all()
        return [self._from_row(row) for row in rows]

    # ── Writes ───────────────────────────────────────────────────────

    async def put(self, db: AsyncSession, record: R | Mapping[str, Any]) -> R:
        """Insert or overwrite a record after validating it."""
        checked = self._for_write(record)
        with storage_errors(f"Writing {checked.id}"):  # type: ignore[attr-defined]
            await db.merge(self._orm(**self._columns(checked)))
            await db.flush()
        logger.debug("Stored %s in %s", checked.id, self.table)  # type: ignore[attr-defined]
        return checked

    async def conditional_put(
        self,
        db: AsyncSession,
        record: R | Mapping[str, Any],
        *,
        expected_updated_at: datetime,
    ) -> R:
        """Overwrite only if the stored row still carries `expected_updated_at`.

        Raises:
            ConflictError: if the row changed (or vanished) since it was read.
        """
        return await self._guarded_update(db, record, [self._orm.updated_at == expected_updated_at])

    async def _guarded_update(
        self,
        db: AsyncSession,
        record: R | Mapping[str, Any],
        conditions: list[Any],
    ) -> R:
        checked = self._for_write(record)
        values = self._columns(checked)
        record_id = values.pop("id")
        stmt = (
            update(self._orm)
            .where(self._orm.id == record_id, *conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with storage_errors(f"Updating {record_id}"):
            result = await db.execute(stmt)
        if result.rowcount != 1:
            logger.info("Conditional write lost for %s", record_id)
            msg = f"{record_id} was modified concurrently"
            raise ConflictError(msg)
        return checked

    # ── Conversion ───────────────────────────────────────────────────

    def _from_row(self, row: Any) -> R:
        raw = {name: getattr(row, name) for name in self._schema.model.model_fields}
        return self._schema.parse(raw)

    def _for_write(self, record: R | Mapping[str, Any]) -> R:
        raw = record.model_dump() if isinstance(record, BaseModel) else record
        return self._schema.parse(raw)

    @staticmethod
    def _columns(record: BaseModel) -> dict[str, Any]:
        return {
            key: value.value if isinstance(value, Enum) else value
            for key, value in record.model_dump().items()
        }


class UserStore(RecordStore[UserRecord]):
    """users table; osm_id is unique."""

    async def get_by_osm_id(self, db: AsyncSession, osm_id: str) -> UserRecord | None:
        records = await self._select(db, select(User).where(User.osm_id == osm_id))
        return records[0] if records else None


class NoteStore(RecordStore[NoteRecord]):
    """notes table; transitions compare-and-swap on status + updated_at."""

    async def conditional_put(
        self,
        db: AsyncSession,
        record: NoteRecord | Mapping[str, Any],
        *,
        expected_updated_at: datetime,
        expected_status: NoteStatus | str | None = None,
    ) -> NoteRecord:
        conditions = [Note.updated_at == expected_updated_at]
        if expected_status is not None:
            conditions.append(Note.status == NoteStatus(expected_status).value)
        return await self._guarded_update(db, record, conditions)

    async def list_for_user(self, db: AsyncSession, user_id: str) -> list[NoteRecord]:
        stmt = select(Note).where(Note.user_id == user_id).order_by(Note.created_at, Note.id)
        return await self._select(db, stmt)


class DataStore(RecordStore[DataRecord]):
    """data table."""

    async def list_for_note(self, db: AsyncSession, note_id: str) -> list[DataRecord]:
        stmt = select(DataFragment).where(DataFragment.note_id == note_id).order_by(
            DataFragment.created_at, DataFragment.id
        )
        return await self._select(db, stmt)


# Module-level singletons
user_store = UserStore(User, UserRecordSchema)
note_store = NoteStore(Note, NoteRecordSchema)
data_store = DataStore(DataFragment, DataRecordSchema)
