"""OpenSearch-backed snippet storage."""

from .config import SearchConfig
from .index import IndexLifecycleManager, index_body
from .store import SnippetStore

__all__ = [
    "IndexLifecycleManager",
    "SearchConfig",
    "SnippetStore",
    "index_body",
]
