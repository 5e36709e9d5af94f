import datetime
import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from schema_snippets.api.route import get_catalog, router, search_snippets
from schema_snippets.api.service import ApiSettings
from schema_snippets.catalog import SnippetCatalog
from schema_snippets.errors import InvalidSnippetError, SnippetConflictError, SnippetNotFoundError
from schema_snippets.opensearch.config import SearchConfig
from schema_snippets.opensearch.store import SnippetStore
from schema_snippets.search import QueryBuilder, SynonymExpander
from schema_snippets.snippet import Snippet


class _StubCatalog:
    def __init__(self, snippets=None):
        self._snippets = list(snippets or [])
        self.created = []
        self.deleted = []
        self.searches = []
        self.create_error = None
        self.delete_error = None
        self.search_error = None

    def create(self, request_body):
        if self.create_error is not None:
            raise self.create_error
        self.created.append(request_body)
        snippet = Snippet.model_validate(json.loads(request_body))
        return snippet.without_source()

    def delete(self, snippet_id):
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append(snippet_id)

    def search(self, search_text, limit):
        if self.search_error is not None:
            raise self.search_error
        self.searches.append({"search_text": search_text, "limit": limit})
        return self._snippets[:limit]


def _make_settings(*, default_limit: int = 10, max_limit: int = 50) -> ApiSettings:
    return ApiSettings(
        opensearch_url="http://localhost:9200",
        opensearch_username=None,
        opensearch_password=None,
        opensearch_verify_certs=True,
        opensearch_timeout=None,
        opensearch_index="snippets",
        default_limit=default_limit,
        max_limit=max_limit,
        strict_ids=False,
        synonym_file=None,
        log_level="INFO",
    )


def _make_client(catalog, settings=None) -> TestClient:
    app = FastAPI()
    app.state.settings = settings or _make_settings()
    app.include_router(router)
    app.dependency_overrides[get_catalog] = lambda: catalog
    return TestClient(app)


def _snippet(snippet_id: str, day: int) -> Snippet:
    return Snippet(
        id=snippet_id,
        title=f"Snippet {day}",
        created_at=datetime.datetime(2024, 1, day, tzinfo=datetime.timezone.utc),
    )


def test_create_returns_created_snippet():
    catalog = _StubCatalog()
    body = json.dumps({"$id": "urn:example:address", "title": "Address", "definitions": "#/x"})

    response = _make_client(catalog).post(
        "/snippet", content=body, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["$id"] == "urn:example:address"
    assert payload["title"] == "Address"
    assert payload["definitions"] == "#/x"
    assert "createdAt" in payload
    assert "source" not in payload
    assert "description" not in payload
    assert catalog.created == [body]


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (InvalidSnippetError("Request body cannot be empty"), 400),
        (SnippetConflictError("urn:dup"), 409),
        (RuntimeError("backend down"), 500),
    ],
)
def test_create_maps_failures_to_status_codes(error, status_code):
    catalog = _StubCatalog()
    catalog.create_error = error

    response = _make_client(catalog).post("/snippet", content="{}")

    assert response.status_code == status_code


def test_create_hides_internal_error_details():
    catalog = _StubCatalog()
    catalog.create_error = RuntimeError("password=hunter2")

    response = _make_client(catalog).post("/snippet", content="{}")

    assert response.json() == {"detail": "Error creating snippet"}


def test_create_rejects_non_utf8_body():
    response = _make_client(_StubCatalog()).post("/snippet", content=b"\xff\xfe{}")

    assert response.status_code == 400


def test_delete_accepts_ids_containing_slashes():
    catalog = _StubCatalog()

    response = _make_client(catalog).delete("/snippet/https://ref.example.org/schemas/address.json")

    assert response.status_code == 204
    assert response.content == b""
    assert catalog.deleted == ["https://ref.example.org/schemas/address.json"]


def test_delete_unknown_snippet_returns_404():
    catalog = _StubCatalog()
    catalog.delete_error = SnippetNotFoundError("urn:missing")

    response = _make_client(catalog).delete("/snippet/urn:missing")

    assert response.status_code == 404
    assert "urn:missing" in response.json()["detail"]


def test_search_reads_search_text_alias_and_default_limit():
    catalog = _StubCatalog([_snippet("urn:2", 2), _snippet("urn:1", 1)])

    response = _make_client(catalog).get("/snippet", params={"searchText": "addres"})

    assert response.status_code == 200
    assert [item["$id"] for item in response.json()] == ["urn:2", "urn:1"]
    assert catalog.searches == [{"search_text": "addres", "limit": 10}]


def test_search_caps_limit_at_maximum():
    catalog = _StubCatalog()

    _make_client(catalog, _make_settings(max_limit=25)).get("/snippet", params={"limit": 500})

    assert catalog.searches == [{"search_text": None, "limit": 25}]


def test_search_rejects_non_positive_limit():
    response = _make_client(_StubCatalog()).get("/snippet", params={"limit": 0})

    assert response.status_code == 422


def test_search_failure_returns_500():
    catalog = _StubCatalog()
    catalog.search_error = RuntimeError("connection refused")

    response = _make_client(catalog).get("/snippet")

    assert response.status_code == 500
    assert response.json() == {"detail": "Error retrieving snippets"}


@pytest.mark.asyncio
async def test_search_snippets_handler_returns_responses():
    catalog = _StubCatalog([_snippet("urn:1", 1)])

    results = await search_snippets(
        search_text=None,
        limit=None,
        settings=_make_settings(default_limit=3),
        catalog=catalog,
    )

    assert [result.id for result in results] == ["urn:1"]
    assert catalog.searches == [{"search_text": None, "limit": 3}]


def test_create_with_source_key_in_document_is_created(fake_client):
    store = SnippetStore(SearchConfig(index_name="snippets"), QueryBuilder(SynonymExpander()))
    body = json.dumps({"$id": "urn:x", "title": "X", "source": "GS1"})

    response = _make_client(SnippetCatalog(store)).post("/snippet", content=body)

    assert response.status_code == 201
    assert "source" not in response.json()
    assert fake_client.index_calls[0]["body"]["source"] == body
