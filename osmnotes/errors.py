"""Error taxonomy for the encryption boundary.

Validation and lifecycle errors subclass ValueError so callers that only
care about "bad input" can catch one type. Storage errors are raised by the
persistence layer and propagated unchanged by the services.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pydantic import ValidationError as PydanticValidationError


class OsmNotesError(Exception):
    """Base class for every error raised by osmnotes."""


@dataclass(frozen=True)
class Issue:
    """One violated constraint: dotted field path + pydantic error type."""

    path: str
    constraint: str
    message: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.message} [{self.constraint}]"


class ValidationError(OsmNotesError, ValueError):
    """Input failed a structural or range constraint of a schema."""

    def __init__(self, schema: str, issues: list[Issue] | tuple[Issue, ...]) -> None:
        self.schema = schema
        self.issues: tuple[Issue, ...] = tuple(issues)
        detail = "; ".join(str(issue) for issue in self.issues) or "invalid input"
        super().__init__(f"{schema} validation failed: {detail}")

    @property
    def path(self) -> str:
        """Field path of the first violation."""
        return self.issues[0].path if self.issues else ""

    @property
    def constraint(self) -> str:
        """Constraint name of the first violation."""
        return self.issues[0].constraint if self.issues else ""

    @classmethod
    def from_pydantic(cls, schema: str, exc: PydanticValidationError) -> ValidationError:
        """Translate a pydantic ValidationError, dropping the offending input values."""
        issues = [
            Issue(
                path=".".join(str(part) for part in err["loc"]),
                constraint=err["type"],
                message=err["msg"],
            )
            for err in exc.errors(include_url=False, include_input=False)
        ]
        return cls(schema, issues)


class InvalidTransitionError(OsmNotesError, ValueError):
    """A requested status change violates draft -> processed -> committed."""

    def __init__(self, current: Any, requested: Any) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            f"Invalid transition: {_status_name(current)} --> {_status_name(requested)}"
        )


class DecryptionError(OsmNotesError):
    """A sealed blob could not be opened (wrong key, corruption, tampering)."""


class AuthenticationError(OsmNotesError):
    """Signin credentials do not match a stored user."""


class StorageError(OsmNotesError):
    """The persistence layer failed to read or write a record."""


class ConflictError(StorageError):
    """A conditional write lost its race or a uniqueness constraint was hit."""


class RecordNotFoundError(StorageError):
    """No record with the requested id is visible to the caller."""

    def __init__(self, record_id: str) -> None:
        self.record_id = record_id
        super().__init__(f"Record not found: {record_id}")


def _status_name(status: Any) -> str:
    return str(getattr(status, "value", status))
