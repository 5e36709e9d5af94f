"""Catalog of reusable JSON-Schema snippets with free-text search."""

from .catalog import SnippetCatalog
from .errors import (
    InvalidSnippetError,
    SnippetConflictError,
    SnippetError,
    SnippetNotFoundError,
)
from .opensearch import IndexLifecycleManager, SearchConfig, SnippetStore
from .search import QueryBuilder, SynonymExpander
from .snippet import Snippet

__all__ = [
    "IndexLifecycleManager",
    "InvalidSnippetError",
    "QueryBuilder",
    "SearchConfig",
    "Snippet",
    "SnippetCatalog",
    "SnippetConflictError",
    "SnippetError",
    "SnippetNotFoundError",
    "SnippetStore",
    "SynonymExpander",
]
