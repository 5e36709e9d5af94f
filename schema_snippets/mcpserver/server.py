"""FastMCP server exposing snippet search as an MCP tool."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import HTTPException
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from ..api.model import SnippetQueryResponse
from ..api.service import ApiSettings, build_snippet_store, search_snippets_service
from ..catalog import SnippetCatalog
from ..search import SynonymExpander

logger = logging.getLogger("schema_snippets")

DEFAULT_TOOL_LIMIT = 10
MAX_TOOL_LIMIT = 50


class ServiceContext:
    """Lazy dependency container for MCP tool handlers."""

    def __init__(self) -> None:
        self._settings: ApiSettings | None = None
        self._catalog: SnippetCatalog | None = None

    @property
    def settings(self) -> ApiSettings:
        if self._settings is None:
            self._settings = ApiSettings.from_env()
        return self._settings

    def catalog(self) -> SnippetCatalog:
        if self._catalog is None:
            synonyms = SynonymExpander.from_resource(self.settings.synonym_file)
            self._catalog = SnippetCatalog(build_snippet_store(self.settings, synonyms))
        return self._catalog


def _handle_http_exception(exc: HTTPException, *, default_message: str) -> ToolError:
    detail = exc.detail if isinstance(exc.detail, str) else None
    message = detail or default_message
    return ToolError(message)


def create_server(services: ServiceContext | None = None) -> FastMCP:
    """Create a FastMCP server wired to the snippet catalog."""

    services = services or ServiceContext()
    server = FastMCP("Schema Snippets MCP Server")

    @server.tool(
        name="search",
        description=(
            "Search stored JSON-Schema snippets by free text. Matching tolerates typos,"
            " partial words and common synonyms; results are ordered newest first."
            " Leave `query` empty to list the most recent snippets. `limit` defaults to 10"
            " and is capped at 50."
        ),
        tags={"snippets", "search"},
    )
    def search(query: str | None = None, limit: int = DEFAULT_TOOL_LIMIT) -> Dict[str, Any]:
        """Query stored snippets and return structured search results."""
        normalized_limit = DEFAULT_TOOL_LIMIT if limit is None else limit
        if normalized_limit <= 0:
            raise ToolError("Limit must be a positive integer.")
        if normalized_limit > MAX_TOOL_LIMIT:
            normalized_limit = MAX_TOOL_LIMIT

        try:
            results = search_snippets_service(query, normalized_limit, services.catalog())
        except HTTPException as exc:
            raise _handle_http_exception(exc, default_message="Snippet search failed")
        except Exception as exc:
            logger.exception("Snippet search failed")
            raise ToolError(f"Snippet search failed: {exc}")

        response = SnippetQueryResponse(query=query, results=results)
        return response.model_dump(mode="json", by_alias=True, exclude_none=True)

    return server


mcp = create_server()

__all__ = ["ServiceContext", "create_server", "mcp"]
