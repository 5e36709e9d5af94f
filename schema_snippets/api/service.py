"""Service-layer helpers for snippet creation, deletion and search."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List

from fastapi import HTTPException, status

from ..catalog import SnippetCatalog
from ..errors import InvalidSnippetError, SnippetConflictError, SnippetNotFoundError
from ..opensearch.config import DEFAULT_INDEX_NAME, DEFAULT_LIMIT, SearchConfig
from ..opensearch.store import SnippetStore
from ..search import QueryBuilder, SynonymExpander
from .model import SnippetResponse

logger = logging.getLogger("schema_snippets")

DEFAULT_MAX_LIMIT = 50


@dataclass(slots=True)
class ApiSettings:
    """Runtime configuration for the API server."""

    opensearch_url: str
    opensearch_username: str | None
    opensearch_password: str | None
    opensearch_verify_certs: bool
    opensearch_timeout: int | None
    opensearch_index: str
    default_limit: int
    max_limit: int
    strict_ids: bool
    synonym_file: str | None
    log_level: str

    @classmethod
    def from_env(cls) -> "ApiSettings":
        def _int_env(name: str, default: int) -> int:
            raw = os.getenv(name)
            if not raw:
                return default
            try:
                return int(raw)
            except ValueError:
                logger.warning("Invalid integer for %s: %s", name, raw)
                return default

        def _optional_int(name: str) -> int | None:
            raw = os.getenv(name)
            if not raw:
                return None
            try:
                return int(raw)
            except ValueError:
                logger.warning("Invalid integer for %s: %s", name, raw)
                return None

        def _bool_env(name: str, default: bool) -> bool:
            raw = os.getenv(name)
            if not raw:
                return default
            return raw.strip().lower() in {"1", "true", "yes", "on"}

        return cls(
            opensearch_url=os.getenv("OPENSEARCH_URL", "http://localhost:9200"),
            opensearch_username=os.getenv("OPENSEARCH_USERNAME"),
            opensearch_password=os.getenv("OPENSEARCH_PASSWORD"),
            opensearch_verify_certs=_bool_env("OPENSEARCH_VERIFY_CERTS", True),
            opensearch_timeout=_optional_int("OPENSEARCH_TIMEOUT"),
            opensearch_index=os.getenv("OPENSEARCH_INDEX", DEFAULT_INDEX_NAME),
            default_limit=_int_env("SNIPPET_DEFAULT_LIMIT", DEFAULT_LIMIT),
            max_limit=_int_env("SNIPPET_MAX_LIMIT", DEFAULT_MAX_LIMIT),
            strict_ids=_bool_env("SNIPPET_STRICT_IDS", False),
            synonym_file=os.getenv("SYNONYM_FILE") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def search_config(self) -> SearchConfig:
        return SearchConfig(
            url=self.opensearch_url,
            username=self.opensearch_username,
            password=self.opensearch_password,
            verify_certs=self.opensearch_verify_certs,
            timeout=self.opensearch_timeout,
            index_name=self.opensearch_index,
            default_limit=self.default_limit,
            strict_ids=self.strict_ids,
        )


def build_snippet_store(settings: ApiSettings, synonyms: SynonymExpander) -> SnippetStore:
    """Create a store and provision its index before it serves traffic."""
    store = SnippetStore(settings.search_config(), QueryBuilder(synonyms))
    store.initialize()
    return store


def resolve_limit(limit: int | None, settings: ApiSettings) -> int:
    if limit is None or limit <= 0:
        return settings.default_limit
    return min(limit, settings.max_limit)


def create_snippet_service(request_body: str, catalog: SnippetCatalog) -> SnippetResponse:
    try:
        snippet = catalog.create(request_body)
    except InvalidSnippetError as exc:
        logger.debug("Validation error creating snippet: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SnippetConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Error creating snippet")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating snippet",
        ) from exc

    return SnippetResponse.from_snippet(snippet)


def delete_snippet_service(snippet_id: str, catalog: SnippetCatalog) -> None:
    try:
        catalog.delete(snippet_id)
    except SnippetNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Error deleting snippet %s", snippet_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting snippet",
        ) from exc


def search_snippets_service(
    search_text: str | None,
    limit: int,
    catalog: SnippetCatalog,
) -> List[SnippetResponse]:
    try:
        snippets = catalog.search(search_text, limit)
    except Exception as exc:
        logger.exception("Snippet search failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error retrieving snippets",
        ) from exc

    return [SnippetResponse.from_snippet(snippet) for snippet in snippets]


__all__ = [
    "ApiSettings",
    "build_snippet_store",
    "resolve_limit",
    "create_snippet_service",
    "delete_snippet_service",
    "search_snippets_service",
]
