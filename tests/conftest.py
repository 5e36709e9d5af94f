from __future__ import annotations

from typing import Any, List

import pytest


def search_response(hits: List[dict[str, Any]] | None = None, *, total: Any = None) -> dict[str, Any]:
    hits = hits or []
    if total is None:
        total = {"value": len(hits), "relation": "eq"}
    return {"hits": {"total": total, "hits": hits}}


def hit(doc_id: str, source: Any) -> dict[str, Any]:
    entry: dict[str, Any] = {"_id": doc_id, "_index": "snippets"}
    if source is not None:
        entry["_source"] = source
    return entry


class _FakeIndices:
    def __init__(self) -> None:
        self.exists_result = False
        self.exists_error: Exception | None = None
        self.create_error: Exception | None = None
        self.exists_calls: list[str] = []
        self.create_calls: list[dict[str, Any]] = []

    def exists(self, index: str) -> bool:
        self.exists_calls.append(index)
        if self.exists_error is not None:
            raise self.exists_error
        return self.exists_result

    def create(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        self.create_calls.append({"index": index, "body": body})
        if self.create_error is not None:
            raise self.create_error
        return {"acknowledged": True, "index": index}


class FakeOpenSearch:
    def __init__(self) -> None:
        self.indices = _FakeIndices()
        self.search_calls: list[dict[str, Any]] = []
        self.index_calls: list[dict[str, Any]] = []
        self.delete_calls: list[dict[str, Any]] = []
        self.search_responses: list[dict[str, Any]] = []
        self.search_error: Exception | None = None
        self.index_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.next_id = "doc-1"

    def search(self, index: str, body: dict[str, Any]) -> dict[str, Any]:
        self.search_calls.append({"index": index, "body": body})
        if self.search_error is not None:
            raise self.search_error
        if self.search_responses:
            return self.search_responses.pop(0)
        return search_response()

    def index(self, **kwargs: Any) -> dict[str, Any]:
        self.index_calls.append(kwargs)
        if self.index_error is not None:
            raise self.index_error
        return {"_id": kwargs.get("id", self.next_id), "result": "created"}

    def delete(self, index: str, id: str) -> dict[str, Any]:
        self.delete_calls.append({"index": index, "id": id})
        if self.delete_error is not None:
            raise self.delete_error
        return {"_id": id, "result": "deleted"}


@pytest.fixture
def fake_client(monkeypatch):
    client = FakeOpenSearch()
    monkeypatch.setattr("schema_snippets.opensearch.store.OpenSearch", lambda **_kwargs: client)
    return client
