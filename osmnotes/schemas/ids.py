"""Record ids — "<table>:<key>" strings, e.g. "note:3f2a...".

RecordId is a NewType so type checkers keep ids apart from free text;
at runtime it is a plain str.
"""

from __future__ import annotations

import uuid
from typing import NewType

RecordId = NewType("RecordId", str)

USER_TABLE = "user"
NOTE_TABLE = "note"
DATA_TABLE = "data"
AUDIT_TABLE = "audit"


def record_id(table: str, key: str) -> RecordId:
    """Build a typed record id from its table and key."""
    if not table or ":" in table:
        msg = f"Invalid table name for record id: {table!r}"
        raise ValueError(msg)
    if not key:
        msg = "Record id key must not be empty"
        raise ValueError(msg)
    return RecordId(f"{table}:{key}")


def new_record_id(table: str) -> RecordId:
    """Mint a fresh random id in `table`."""
    return record_id(table, uuid.uuid4().hex)


def record_table(rid: str) -> str:
    """Return the table part of a record id."""
    table, sep, key = rid.partition(":")
    if not sep or not table or not key:
        msg = f"Not a record id: {rid!r}"
        raise ValueError(msg)
    return table
