"""Shared Pydantic base models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictBaseModel(BaseModel):
    """Base model with strict, immutable defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class CamelModel(StrictBaseModel):
    """Strict model that serializes with camelCase keys.

    Accepts both snake_case field names and their camelCase aliases on input.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
