"""FastAPI routes for snippet creation, deletion and search."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ..catalog import SnippetCatalog
from ..opensearch.store import SnippetStore
from ..search import SynonymExpander
from .model import SnippetResponse
from .service import (
    ApiSettings,
    build_snippet_store,
    create_snippet_service,
    delete_snippet_service,
    resolve_limit,
    search_snippets_service,
)


def get_settings(request: Request) -> ApiSettings:
    settings = getattr(request.app.state, "settings", None)
    if not isinstance(settings, ApiSettings):
        raise RuntimeError("API settings have not been initialised")
    return settings


def get_synonyms(
    request: Request,
    settings: ApiSettings = Depends(get_settings),
) -> SynonymExpander:
    synonyms = getattr(request.app.state, "synonyms", None)
    if synonyms is None:
        synonyms = SynonymExpander.from_resource(settings.synonym_file)
        request.app.state.synonyms = synonyms
    return synonyms


def get_snippet_store(
    request: Request,
    settings: ApiSettings = Depends(get_settings),
    synonyms: SynonymExpander = Depends(get_synonyms),
) -> SnippetStore:
    store = getattr(request.app.state, "snippet_store", None)
    if store is None:
        store = build_snippet_store(settings, synonyms)
        request.app.state.snippet_store = store
    return store


def get_catalog(store: SnippetStore = Depends(get_snippet_store)) -> SnippetCatalog:
    return SnippetCatalog(store)


router = APIRouter()


@router.post(
    "/snippet",
    response_model=SnippetResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_snippet(
    request: Request,
    catalog: SnippetCatalog = Depends(get_catalog),
) -> SnippetResponse:
    """Create a snippet from the raw JSON document in the request body."""
    raw_body = await request.body()
    try:
        request_body = raw_body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be UTF-8 encoded JSON",
        ) from exc
    return create_snippet_service(request_body, catalog)


@router.delete(
    "/snippet/{snippet_id:path}",
    response_class=Response,
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_snippet(
    snippet_id: str,
    catalog: SnippetCatalog = Depends(get_catalog),
) -> Response:
    delete_snippet_service(snippet_id, catalog)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/snippet",
    response_model=List[SnippetResponse],
    response_model_exclude_none=True,
)
async def search_snippets(
    search_text: str | None = Query(
        None, alias="searchText", description="Text to search for in snippets"
    ),
    limit: int | None = Query(None, ge=1, description="Maximum number of snippets to return"),
    settings: ApiSettings = Depends(get_settings),
    catalog: SnippetCatalog = Depends(get_catalog),
) -> List[SnippetResponse]:
    return search_snippets_service(search_text, resolve_limit(limit, settings), catalog)


__all__ = ["router", "get_catalog", "get_settings", "get_snippet_store", "get_synonyms"]
