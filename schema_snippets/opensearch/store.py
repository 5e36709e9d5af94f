from __future__ import annotations

import logging
from typing import Any, List, Sequence

from opensearchpy import OpenSearch
from opensearchpy.exceptions import ConflictError, NotFoundError
from pydantic import ValidationError

from ..errors import InvalidSnippetError, SnippetConflictError, SnippetNotFoundError
from ..search.query_builder import QueryBuilder
from ..snippet import Snippet
from .config import SearchConfig
from .index import IndexLifecycleManager

logger = logging.getLogger("schema_snippets")

CREATED_AT_FIELD = "createdAt"
SOURCE_FIELD = "source"


class SnippetStore:
    """Create, delete, search and look up snippets stored in OpenSearch.

    Uniqueness of ``$id`` is best effort: ``exists_by_id`` followed by
    ``save`` is check-then-act with no transactional guard, so two concurrent
    creates for the same id can both succeed. ``SearchConfig.strict_ids``
    switches ``save`` to the backend's create-if-absent write instead.
    """

    def __init__(
        self,
        config: SearchConfig,
        query_builder: QueryBuilder,
    ) -> None:
        self.config = config
        self.index_name = config.index_name
        self.query_builder = query_builder

        self._client = OpenSearch(**config.client_kwargs())
        self._index_manager = IndexLifecycleManager(self._client, self.index_name)
        self._initialized = False

    def initialize(self) -> None:
        """Provision the index once for this store."""
        if self._initialized:
            return
        self._index_manager.ensure_index()
        self._initialized = True

    def save(self, snippet: Snippet, source_json: str) -> str:
        """Index ``snippet`` with its verbatim source. Returns the document handle."""
        if snippet.source is not None and snippet.source != source_json:
            raise InvalidSnippetError("Snippet source is immutable once set")
        snippet.source = source_json

        index_kwargs: dict[str, Any] = {
            "index": self.index_name,
            "body": snippet.to_document(),
        }
        if self.config.strict_ids and snippet.id:
            index_kwargs["id"] = snippet.id
            index_kwargs["op_type"] = "create"

        try:
            response = self._client.index(**index_kwargs)
        except ConflictError as exc:
            raise SnippetConflictError(snippet.id or "") from exc
        except Exception:
            logger.exception("Error saving snippet %s", snippet.id)
            raise

        document_id = str(response.get("_id"))
        logger.debug("Indexed snippet %s with document ID %s", snippet.id, document_id)
        return document_id

    def resolve_handle(self, snippet_id: str) -> str | None:
        """Map a logical ``$id`` to the backend document handle, if any."""
        body = {
            "query": self.query_builder.build_id_query(snippet_id),
            "size": 1,
            "_source": False,
        }
        response = self._client.search(index=self.index_name, body=body)
        if _total_hits(response) == 0:
            return None

        hits = _hits(response)
        if not hits:
            return None
        handle = hits[0].get("_id")
        return str(handle) if handle is not None else None

    def delete(self, snippet_id: str) -> None:
        """Delete the snippet with logical id ``snippet_id``.

        Resolving the handle and deleting by it are two separate requests; a
        concurrent delete in between is reported as not found.
        """
        try:
            handle = self.resolve_handle(snippet_id)
        except Exception:
            logger.exception("Error resolving snippet %s for deletion", snippet_id)
            raise

        if handle is None:
            raise SnippetNotFoundError(snippet_id)

        try:
            self._client.delete(index=self.index_name, id=handle)
        except NotFoundError as exc:
            raise SnippetNotFoundError(snippet_id) from exc
        except Exception:
            logger.exception("Error deleting snippet %s", snippet_id)
            raise

        logger.debug("Deleted snippet %s with document ID %s", snippet_id, handle)

    def search(self, search_text: str | None, limit: int) -> List[Snippet]:
        """Return snippets matching ``search_text``, newest first."""
        size = limit if limit > 0 else self.config.default_limit
        body = {
            "query": self.query_builder.build_search_query(search_text),
            "sort": [{CREATED_AT_FIELD: {"order": "desc"}}],
            "size": size,
            "_source": {"excludes": [SOURCE_FIELD]},
        }

        try:
            response = self._client.search(index=self.index_name, body=body)
        except Exception:
            logger.exception("Error searching snippets")
            raise

        return self._parse_hits(_hits(response))[:size]

    def exists_by_id(self, snippet_id: str | None) -> bool:
        if not snippet_id or not snippet_id.strip():
            return False

        body = {
            "query": self.query_builder.build_id_query(snippet_id),
            "size": 0,
        }
        try:
            response = self._client.search(index=self.index_name, body=body)
        except Exception:
            logger.exception("Error checking if snippet exists by $id %s", snippet_id)
            raise

        return _total_hits(response) > 0

    @staticmethod
    def _parse_hits(hits: Sequence[dict[str, Any]]) -> List[Snippet]:
        snippets: List[Snippet] = []
        for hit in hits:
            payload = hit.get("_source")
            if not isinstance(payload, dict):
                logger.debug("Skipping hit %s without payload", hit.get("_id", "?"))
                continue

            try:
                snippet = Snippet.model_validate(payload)
            except ValidationError as exc:
                logger.error("Error converting search hit %s to Snippet: %s", hit.get("_id", "?"), exc)
                continue

            snippets.append(snippet.without_source())

        return snippets


def _hits(response: Any) -> List[dict[str, Any]]:
    hits_container = (response or {}).get("hits") or {}
    return [hit for hit in hits_container.get("hits") or [] if isinstance(hit, dict)]


def _total_hits(response: Any) -> int:
    total = ((response or {}).get("hits") or {}).get("total")
    if isinstance(total, dict):
        total = total.get("value")
    try:
        return int(total) if total is not None else 0
    except (TypeError, ValueError):
        logger.debug("Unable to coerce total hit count from %r", total, exc_info=True)
        return 0


__all__ = ["SnippetStore"]
