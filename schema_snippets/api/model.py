"""Pydantic models for the public API surface."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ..snippet import Definitions, Snippet


class SnippetResponse(BaseModel):
    id: str | None = Field(None, alias="$id")
    schema_uri: str | None = Field(None, alias="$schema")
    title: str | None = None
    description: str | None = None
    definitions: Definitions | None = None
    defs: Definitions | None = Field(None, alias="$defs")
    created_at: datetime | None = Field(None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_snippet(cls, snippet: Snippet) -> "SnippetResponse":
        return cls(
            id=snippet.id,
            schema_uri=snippet.schema_uri,
            title=snippet.title,
            description=snippet.description,
            definitions=snippet.definitions,
            defs=snippet.defs,
            created_at=snippet.created_at,
        )


class SnippetQueryResponse(BaseModel):
    query: str | None = None
    results: List[SnippetResponse]


__all__ = ["SnippetResponse", "SnippetQueryResponse"]
