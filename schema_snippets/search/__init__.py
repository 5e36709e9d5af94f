"""Query construction and synonym expansion for snippet search."""

from .query_builder import Query, QueryBuilder
from .synonyms import SynonymExpander, load_synonym_table

__all__ = [
    "Query",
    "QueryBuilder",
    "SynonymExpander",
    "load_synonym_table",
]
