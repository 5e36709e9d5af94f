"""Create, delete and search operations offered to the outer layers."""

from __future__ import annotations

import json
import logging
from typing import Any, List

from pydantic import ValidationError

from .errors import InvalidSnippetError, SnippetConflictError
from .opensearch.store import SnippetStore
from .snippet import Snippet

logger = logging.getLogger("schema_snippets")

SOURCE_KEY = "source"


class SnippetCatalog:
    """Business rules between the outer surfaces and the snippet store."""

    def __init__(self, store: SnippetStore) -> None:
        self.store = store

    def create(self, request_body: str | None) -> Snippet:
        """Store the JSON document ``request_body`` as a new snippet.

        Raises InvalidSnippetError for an unusable body and
        SnippetConflictError when its ``$id`` is already taken. The returned
        snippet never carries ``source``.
        """
        if request_body is None or not request_body.strip():
            raise InvalidSnippetError("Request body cannot be empty")

        try:
            document: Any = json.loads(request_body)
        except json.JSONDecodeError as exc:
            raise InvalidSnippetError(f"Invalid JSON format: {exc}") from exc

        if not isinstance(document, dict):
            raise InvalidSnippetError("Invalid snippet format: expected a JSON object")

        # ``source`` is always the raw request body, never a document key.
        document.pop(SOURCE_KEY, None)
        try:
            snippet = Snippet.model_validate(document)
        except ValidationError as exc:
            raise InvalidSnippetError(f"Invalid snippet format: {exc}") from exc

        if snippet.id is not None and self.store.exists_by_id(snippet.id):
            raise SnippetConflictError(snippet.id)

        self.store.save(snippet, request_body)
        logger.info("Created new snippet with $id: %s", snippet.id or "<no id>")

        return snippet.without_source()

    def delete(self, snippet_id: str) -> None:
        self.store.delete(snippet_id)
        logger.info("Deleted snippet with $id: %s", snippet_id)

    def search(self, search_text: str | None, limit: int) -> List[Snippet]:
        return self.store.search(search_text, limit)


__all__ = ["SnippetCatalog"]
