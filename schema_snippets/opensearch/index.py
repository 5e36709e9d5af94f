"""Provisioning of the snippet index and its field mappings."""

from __future__ import annotations

import copy
import logging
from typing import Any

from opensearchpy import OpenSearch
from opensearchpy.exceptions import OpenSearchException, RequestError

from .config import DEFAULT_INDEX_NAME

logger = logging.getLogger("schema_snippets")

TEXT_ANALYZER = "snippet_text"
ALREADY_EXISTS_ERROR = "resource_already_exists_exception"

# Wire contract for every writer of this index.
_INDEX_BODY: dict[str, Any] = {
    "settings": {
        "number_of_shards": 1,
        "number_of_replicas": 0,
        "analysis": {
            "analyzer": {
                TEXT_ANALYZER: {
                    "type": "standard",
                    "stopwords": "_english_",
                }
            }
        },
    },
    "mappings": {
        "properties": {
            "$id": {
                "type": "text",
                "fields": {"keyword": {"type": "keyword", "ignore_above": 512}},
            },
            "$schema": {"type": "keyword"},
            "title": {"type": "text", "analyzer": TEXT_ANALYZER, "boost": 2.0},
            "description": {"type": "text", "analyzer": TEXT_ANALYZER, "boost": 1.0},
            "definitions": {"type": "object", "enabled": False},
            "$defs": {"type": "object", "enabled": False},
            "source": {"type": "text", "index": False},
            "createdAt": {"type": "date"},
        }
    },
}


def index_body() -> dict[str, Any]:
    """Return a fresh copy of the index settings and mappings."""
    return copy.deepcopy(_INDEX_BODY)


class IndexLifecycleManager:
    """Make sure the snippet index exists before the store serves traffic."""

    def __init__(self, client: OpenSearch, index_name: str = DEFAULT_INDEX_NAME) -> None:
        self._client = client
        self.index_name = index_name

    def ensure_index(self) -> bool:
        """Create the index when missing. Returns True if this call created it.

        Failures are logged and swallowed. Operations against a missing
        index then fail individually.
        """
        try:
            if self._index_exists():
                logger.info("OpenSearch index already exists: %s", self.index_name)
                return False
            self._create_index()
        except RequestError as exc:
            if exc.error == ALREADY_EXISTS_ERROR:
                logger.info(
                    "OpenSearch index %s was created concurrently; nothing to do",
                    self.index_name,
                )
                return False
            logger.exception("Failed to initialize OpenSearch index %s", self.index_name)
            return False
        except OpenSearchException:
            logger.exception("Failed to initialize OpenSearch index %s", self.index_name)
            return False

        logger.info("Created OpenSearch index: %s", self.index_name)
        return True

    def _index_exists(self) -> bool:
        return bool(self._client.indices.exists(index=self.index_name))

    def _create_index(self) -> None:
        self._client.indices.create(index=self.index_name, body=index_body())


__all__ = ["IndexLifecycleManager", "index_body", "TEXT_ANALYZER"]
