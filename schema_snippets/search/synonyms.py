"""Static synonym table used to widen free-text snippet searches.

The table maps a canonical term to an ordered list of related terms. It is
loaded once per process and never mutated afterwards; membership is treated
symmetrically, so looking up *any* member of a group returns the whole group.

Example:
    - "uri" expands to {"uri", "url", "link", "address", ...}
    - "drug" expands to {"drug", "pharma", "pharmaceutical", "medicine", ...}
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Sequence, Set

logger = logging.getLogger("schema_snippets")

SYNONYM_RESOURCE = "synonym-map.json"
MIN_TERM_LENGTH = 2


def normalize_term(term: str | None) -> str:
    if not term:
        return ""
    return term.strip().lower()


def load_synonym_table(path: str | Path | None = None) -> dict[str, list[str]]:
    """Read the synonym table from ``path`` or the bundled resource.

    A missing or unreadable table is not fatal: the caller gets an empty
    table and search degrades to matching the original term only.
    """
    try:
        if path is not None:
            raw = Path(path).read_text(encoding="utf-8")
            origin = str(path)
        else:
            raw = resources.files(__package__).joinpath(SYNONYM_RESOURCE).read_text(encoding="utf-8")
            origin = SYNONYM_RESOURCE
    except FileNotFoundError:
        logger.warning("Synonym file not found: %s. Using empty synonym map.", path or SYNONYM_RESOURCE)
        return {}
    except OSError:
        logger.error("Failed to read synonyms from %s", path or SYNONYM_RESOURCE, exc_info=True)
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.error("Failed to parse synonyms from %s", origin, exc_info=True)
        return {}

    if not isinstance(data, dict):
        logger.error("Synonym file %s must contain a JSON object", origin)
        return {}

    table: dict[str, list[str]] = {}
    for key, values in data.items():
        if not isinstance(values, list):
            logger.debug("Skipping synonym entry %r with non-list value", key)
            continue
        table[str(key)] = [str(value) for value in values]

    logger.info("Loaded %d synonym entries from %s", len(table), origin)
    return table


class SynonymExpander:
    """Expand a query term into the closure of its synonym group."""

    def __init__(self, table: Mapping[str, Sequence[str]] | None = None) -> None:
        normalized: dict[str, tuple[str, ...]] = {}
        for key, values in (table or {}).items():
            canonical = normalize_term(key)
            if not canonical:
                continue
            members = tuple(term for term in (normalize_term(v) for v in values) if term)
            normalized[canonical] = normalized.get(canonical, ()) + members

        reverse: dict[str, set[str]] = defaultdict(set)
        for key, members in normalized.items():
            for member in members:
                reverse[member].add(key)

        self._table: Mapping[str, tuple[str, ...]] = MappingProxyType(normalized)
        self._reverse: Mapping[str, frozenset[str]] = MappingProxyType(
            {member: frozenset(keys) for member, keys in reverse.items()}
        )

    @classmethod
    def from_resource(cls, path: str | Path | None = None) -> "SynonymExpander":
        return cls(load_synonym_table(path))

    @property
    def table(self) -> Mapping[str, tuple[str, ...]]:
        return self._table

    def __len__(self) -> int:
        return len(self._table)

    def synonyms_for(self, term: str | None) -> Set[str]:
        """Return ``term`` plus every term sharing a synonym group with it."""
        normalized = normalize_term(term)
        if len(normalized) < MIN_TERM_LENGTH:
            return set()

        result = {normalized}

        members = self._table.get(normalized)
        if members is not None:
            result.update(members)
            result.add(normalized)

        for key in self._reverse.get(normalized, ()):
            result.add(key)
            result.update(self._table[key])

        return result


__all__ = [
    "MIN_TERM_LENGTH",
    "SYNONYM_RESOURCE",
    "SynonymExpander",
    "load_synonym_table",
    "normalize_term",
]
