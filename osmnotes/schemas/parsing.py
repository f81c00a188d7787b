"""Schema wrapper with a non-throwing parse entry point.

`safe_parse` returns ParseSuccess or ParseFailure and never raises for bad
input; `parse` raises osmnotes.errors.ValidationError. Schema instances hold
no mutable state and are created once at import time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from osmnotes.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class ParseSuccess(Generic[M]):
    """Validated value."""

    value: M
    success: Literal[True] = True


@dataclass(frozen=True)
class ParseFailure:
    """Rejected input with the violated constraints."""

    error: ValidationError
    success: Literal[False] = False


ParseResult = Union[ParseSuccess[M], ParseFailure]


class Schema(Generic[M]):
    """Validator bound to one pydantic model."""

    __slots__ = ("model",)

    def __init__(self, model: type[M]) -> None:
        self.model = model

    @property
    def name(self) -> str:
        return self.model.__name__

    def safe_parse(self, raw: Any) -> ParseResult[M]:
        try:
            value = self.model.model_validate(raw)
        except PydanticValidationError as exc:
            return ParseFailure(error=ValidationError.from_pydantic(self.name, exc))
        return ParseSuccess(value=value)

    def parse(self, raw: Any) -> M:
        result = self.safe_parse(raw)
        if isinstance(result, ParseFailure):
            raise result.error
        return result.value

    def is_valid(self, raw: Any) -> bool:
        return self.safe_parse(raw).success

    def __repr__(self) -> str:
        return f"<Schema {self.name}>"
