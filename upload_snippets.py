from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Iterable, List, Sequence

from tqdm import tqdm

from schema_snippets.catalog import SnippetCatalog
from schema_snippets.errors import SnippetError
from schema_snippets.opensearch.config import DEFAULT_INDEX_NAME, SearchConfig
from schema_snippets.opensearch.store import SnippetStore
from schema_snippets.search import QueryBuilder, SynonymExpander


logger = logging.getLogger("schema_snippets")


def collect_files(paths: Sequence[str]) -> List[Path]:
    """Expand files and directories into a sorted list of JSON files."""
    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*.json") if p.is_file()))
        elif path.is_file():
            files.append(path)
        else:
            raise FileNotFoundError(f"Path does not exist: {raw}")
    return files


def upload(catalog: SnippetCatalog, files: Iterable[Path]) -> tuple[int, List[str]]:
    """Create one snippet per file. Returns the created count and error messages."""
    created = 0
    errors: List[str] = []
    file_list = list(files)

    with tqdm(total=len(file_list), desc="Uploading snippets", unit="file") as pbar:
        for path in file_list:
            try:
                snippet = catalog.create(path.read_text(encoding="utf-8"))
            except SnippetError as exc:
                errors.append(f"{path.name}: {exc}")
            except UnicodeDecodeError:
                errors.append(f"{path.name}: not a UTF-8 text file")
            else:
                created += 1
                logger.debug("Uploaded %s as %s", path, snippet.id)
            pbar.update(1)

    return created, errors


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Upload JSON-Schema snippet files to the snippet catalog"
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Snippet JSON files or directories containing them",
    )
    parser.add_argument(
        "--opensearch-url",
        dest="opensearch_url",
        default=None,
        help="OpenSearch URL (defaults to OPENSEARCH_URL env variable)",
    )
    parser.add_argument(
        "--index",
        dest="index_name",
        default=None,
        help=f"Index name (defaults to OPENSEARCH_INDEX or {DEFAULT_INDEX_NAME})",
    )
    parser.add_argument(
        "--strict-ids",
        action="store_true",
        help="Use the snippet $id as document id and reject duplicates atomically",
    )

    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(message)s")

    try:
        files = collect_files(args.paths)
    except FileNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if not files:
        print("No snippet files found.", file=sys.stderr)
        sys.exit(1)

    config = SearchConfig(
        url=args.opensearch_url or os.getenv("OPENSEARCH_URL", "http://localhost:9200"),
        username=os.getenv("OPENSEARCH_USERNAME"),
        password=os.getenv("OPENSEARCH_PASSWORD"),
        index_name=args.index_name or os.getenv("OPENSEARCH_INDEX", DEFAULT_INDEX_NAME),
        strict_ids=args.strict_ids,
    )
    store = SnippetStore(config, QueryBuilder(SynonymExpander.from_resource()))
    store.initialize()

    try:
        created, errors = upload(SnippetCatalog(store), files)
    except KeyboardInterrupt:
        print("\n⚠️ Operation interrupted", file=sys.stderr)
        sys.exit(1)
    except Exception:
        logger.exception("Failed to upload snippets")
        print("❌ Upload failed. See log for details.", file=sys.stderr)
        sys.exit(1)

    tqdm.write(f"✅ Uploaded {created}/{len(files)} snippets")
    if errors:
        tqdm.write("\n⚠️  Skipped:")
        for message in errors[:10]:
            tqdm.write(f"  • {message}")
        if len(errors) > 10:
            tqdm.write(f"  ... and {len(errors) - 10} more")


if __name__ == "__main__":
    main()
