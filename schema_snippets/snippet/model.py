from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field

# ``definitions`` and ``$defs`` are either a JSON object or an opaque string.
# Left-to-right matching keeps an object an object and a string a string.
Definitions = Annotated[Union[Dict[str, Any], str], Field(union_mode="left_to_right")]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Snippet(BaseModel):
    """A reusable JSON-Schema fragment as stored in the search index."""

    id: str | None = Field(None, alias="$id")
    schema_uri: str | None = Field(None, alias="$schema")
    title: str | None = None
    description: str | None = None
    definitions: Definitions | None = None
    defs: Definitions | None = Field(None, alias="$defs")
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    source: str | None = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    def without_source(self) -> "Snippet":
        """Return a copy safe to hand to list/search callers."""
        return self.model_copy(update={"source": None})

    def to_document(self) -> dict[str, Any]:
        """Serialize to the JSON document written to the index."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


__all__ = ["Definitions", "Snippet"]
