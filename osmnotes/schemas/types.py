"""Annotated field types shared by every schema.

Primitive fields are strict: "90" is not a latitude and True is not a
version number. Integral floats such as 2.0 still count as integers, the
way JSON numbers do. Enum and timestamp fields stay lax so that literal
strings and ISO-8601 instants read back from storage validate.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import AwareDatetime, BaseModel, BeforeValidator, ConfigDict, Field, Strict


def _as_bytes(value: Any) -> Any:
    """Normalise bytearray/memoryview to bytes; leave everything else for the strict check."""
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


def _as_bytes_or_octets(value: Any) -> Any:
    """Also accept the JSON wire form of a byte sequence: a list of ints 0..255."""
    if isinstance(value, (list, tuple)):
        for octet in value:
            if isinstance(octet, bool) or not isinstance(octet, int) or not 0 <= octet <= 255:
                msg = "byte sequence items must be integers in 0..255"
                raise ValueError(msg)
        return bytes(value)
    return _as_bytes(value)


def _integral_float_as_int(value: Any) -> Any:
    """JSON numbers carry no int/float split: 2.0 is the integer 2, 2.5 is not."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def reject_null(value: Any) -> Any:
    """Before-validator body for optional fields that may be omitted but never null."""
    if value is None:
        msg = "may be omitted but must not be null"
        raise ValueError(msg)
    return value


Text = Annotated[str, Strict()]
NonEmptyText = Annotated[str, Strict(), Field(min_length=1)]
Latitude = Annotated[float, Strict(), Field(ge=-90.0, le=90.0)]
Longitude = Annotated[float, Strict(), Field(ge=-180.0, le=180.0)]
Confidence = Annotated[float, Strict(), Field(ge=0.0, le=1.0)]
PositiveInt = Annotated[int, Strict(), Field(gt=0), BeforeValidator(_integral_float_as_int)]
Instant = AwareDatetime

# Column-bounded strings, sized like the users/notes/data columns.
RecordKey = Annotated[str, Strict(), Field(max_length=80)]
OsmId = Annotated[str, Strict(), Field(min_length=1, max_length=64)]
StoredHash = Annotated[str, Strict(), Field(min_length=1, max_length=255)]

# Sealed ciphertext: bytes-like only, never empty.
SealedBytes = Annotated[bytes, Strict(), Field(min_length=1), BeforeValidator(_as_bytes)]

# Derived password bytes in auth payloads: bytes-like or a list of octets.
DerivedBytes = Annotated[bytes, Strict(), Field(min_length=1), BeforeValidator(_as_bytes_or_octets)]


class FrozenSchema(BaseModel):
    """Base for every schema: immutable, unknown keys stripped."""

    model_config = ConfigDict(frozen=True, extra="ignore")
