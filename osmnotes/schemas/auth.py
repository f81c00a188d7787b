"""Auth parameter schemas — signup and signin payloads.

`password` is never the user's secret: it is the output of the key-derivation
step (see osmnotes.security.passwords), so only presence and shape are
checked. Fields accept both the long names and the short wire aliases
NS / DB / AC.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import ConfigDict, Field

from osmnotes.schemas.parsing import Schema
from osmnotes.schemas.types import DerivedBytes, FrozenSchema, OsmId, Text

_BYTE_FIELDS = ("password", "encrypted_openai_key")


class _AuthParams(FrozenSchema):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    namespace: Text = Field(alias="NS")
    database: Text = Field(alias="DB")
    access_method: Literal["user"] = Field(alias="AC")
    osm_id: OsmId
    password: DerivedBytes = Field(repr=False)

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready form: short aliases, byte sequences as lists of ints."""
        data = self.model_dump(by_alias=True)
        for key in _BYTE_FIELDS:
            if isinstance(data.get(key), bytes):
                data[key] = list(data[key])
        return data


class SignupParams(_AuthParams):
    """First contact for an OSM identity; may carry a client-sealed OpenAI key."""

    encrypted_openai_key: DerivedBytes | None = Field(default=None, repr=False)


class SigninParams(_AuthParams):
    """Returning user."""


SignupParamsSchema: Schema[SignupParams] = Schema(SignupParams)
SigninParamsSchema: Schema[SigninParams] = Schema(SigninParams)
