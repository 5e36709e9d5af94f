from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Sequence

from schema_snippets.catalog import SnippetCatalog
from schema_snippets.opensearch.config import DEFAULT_INDEX_NAME, SearchConfig
from schema_snippets.opensearch.store import SnippetStore
from schema_snippets.search import QueryBuilder, SynonymExpander
from schema_snippets.snippet import Snippet


logger = logging.getLogger("schema_snippets")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Search stored JSON-Schema snippets",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Free-form search text (omit to list the most recent snippets)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Maximum number of snippets to return (default: 10)",
    )
    parser.add_argument(
        "--opensearch-url",
        dest="opensearch_url",
        default=None,
        help="Override OpenSearch URL (defaults to OPENSEARCH_URL env variable)",
    )
    parser.add_argument(
        "--index",
        dest="index_name",
        default=None,
        help=f"Index to query (defaults to OPENSEARCH_INDEX or {DEFAULT_INDEX_NAME})",
    )
    parser.add_argument(
        "--synonyms",
        dest="synonym_file",
        default=None,
        help="Path to a synonym map JSON file (defaults to the bundled map)",
    )
    parser.add_argument(
        "--show-definitions",
        action="store_true",
        help="Print each snippet's definitions payload",
    )

    return parser.parse_args()


def build_catalog(args: argparse.Namespace) -> SnippetCatalog:
    config = SearchConfig(
        url=args.opensearch_url or os.getenv("OPENSEARCH_URL", "http://localhost:9200"),
        username=os.getenv("OPENSEARCH_USERNAME"),
        password=os.getenv("OPENSEARCH_PASSWORD"),
        index_name=args.index_name or os.getenv("OPENSEARCH_INDEX", DEFAULT_INDEX_NAME),
    )
    synonyms = SynonymExpander.from_resource(args.synonym_file or os.getenv("SYNONYM_FILE"))
    return SnippetCatalog(SnippetStore(config, QueryBuilder(synonyms)))


def format_snippets(snippets: Sequence[Snippet], *, show_definitions: bool = False) -> str:
    if not snippets:
        return "List of Snippets (0)\nNo results found."

    lines: list[str] = [f"List of Snippets ({len(snippets)})"]
    for index, snippet in enumerate(snippets, start=1):
        lines.extend(
            [
                "",
                f"{index}. {snippet.title or '<untitled>'}",
                f"   $id: {snippet.id or '-'}",
                f"   Description: {snippet.description or '-'}",
                f"   Created: {snippet.created_at.isoformat()}",
            ]
        )
        if show_definitions and snippet.definitions is not None:
            payload = snippet.definitions
            rendered = payload if isinstance(payload, str) else json.dumps(payload, indent=2)
            lines.append("   Definitions:")
            for payload_line in rendered.splitlines() or [""]:
                lines.append(f"   {payload_line}")

    return "\n".join(lines)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    args = parse_args()

    if args.limit <= 0:
        print("--limit must be a positive integer", file=sys.stderr)
        sys.exit(2)

    catalog = build_catalog(args)

    try:
        snippets = catalog.search(args.query, args.limit)
    except Exception:
        logger.exception("Snippet search failed")
        print("❌ Query failed. See log for details.", file=sys.stderr)
        sys.exit(1)

    print(format_snippets(snippets, show_definitions=args.show_definitions))


if __name__ == "__main__":
    main()
