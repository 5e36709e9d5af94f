"""OpenSearch query construction for snippet search and id lookups."""

from __future__ import annotations

from typing import Any, Dict, List

from .synonyms import SynonymExpander, normalize_term

Query = Dict[str, Any]

ID_KEYWORD_FIELD = "$id.keyword"
TITLE_FIELD = "title"
DESCRIPTION_FIELD = "description"

FUZZINESS_LEVEL = "2"
PREFIX_LENGTH = 2
MINIMUM_SHOULD_MATCH = 1


class QueryBuilder:
    """Compose the boolean search query sent to OpenSearch.

    A snippet qualifies when any one strategy hits: fuzzy full-text match
    (typos), substring wildcard match (word fragments), or either of those
    for a synonym of the search text (vocabulary mismatch). Ranking is left
    to the backend's scoring together with the field boosts of the index.
    """

    def __init__(self, synonyms: SynonymExpander) -> None:
        self.synonyms = synonyms

    def build_search_query(self, search_text: str | None) -> Query:
        if search_text is None or not search_text.strip():
            return {"match_all": {}}

        text = search_text.strip()
        should: List[Query] = self._term_clauses(text)

        normalized = normalize_term(text)
        for synonym in sorted(self.synonyms.synonyms_for(text)):
            # The original text is already covered above.
            if synonym == normalized:
                continue
            should.extend(self._term_clauses(synonym))

        return {
            "bool": {
                "should": should,
                "minimum_should_match": MINIMUM_SHOULD_MATCH,
            }
        }

    @staticmethod
    def build_id_query(snippet_id: str) -> Query:
        """Exact match on the keyword subfield; identifiers are never tokenized."""
        return {"term": {ID_KEYWORD_FIELD: {"value": snippet_id}}}

    def _term_clauses(self, text: str) -> List[Query]:
        return [self._multi_match(text), *self._wildcards(text)]

    @staticmethod
    def _multi_match(text: str) -> Query:
        return {
            "multi_match": {
                "query": text,
                "fields": [TITLE_FIELD, DESCRIPTION_FIELD],
                "fuzziness": FUZZINESS_LEVEL,
                "fuzzy_transpositions": True,
                "prefix_length": PREFIX_LENGTH,
            }
        }

    @staticmethod
    def _wildcards(text: str) -> List[Query]:
        pattern = f"*{text.lower()}*"
        return [
            {"wildcard": {TITLE_FIELD: {"value": pattern}}},
            {"wildcard": {DESCRIPTION_FIELD: {"value": pattern}}},
        ]


__all__ = [
    "DESCRIPTION_FIELD",
    "FUZZINESS_LEVEL",
    "ID_KEYWORD_FIELD",
    "MINIMUM_SHOULD_MATCH",
    "PREFIX_LENGTH",
    "Query",
    "QueryBuilder",
    "TITLE_FIELD",
]
