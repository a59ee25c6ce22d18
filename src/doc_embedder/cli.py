"""Command-line entry point.

Check the index connection, ingest files, or search::

    doc-embedder check
    doc-embedder ingest docs/ handbook.txt --chunk-size 800 --namespace auto
    doc-embedder search "parental leave" --top-k 3 --namespace handbook
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from doc_embedder.ingestion.models import IngestionSettings

logger = logging.getLogger("doc_embedder")


def _chunk_size(value: str) -> int | str:
    if value == "auto":
        return value
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected 'auto' or a positive integer, got {value!r}") from None
    if size <= 0:
        raise argparse.ArgumentTypeError(f"chunk size must be positive, got {size}")
    return size


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"value must be positive, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doc-embedder",
        description="Chunk, embed and index documents; search the index.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("check", help="Verify the vector index is reachable")

    ingest = sub.add_parser("ingest", help="Embed documents into the vector index")
    ingest.add_argument(
        "paths",
        nargs="*",
        help="Text files or directories; the built-in samples are used when omitted",
    )
    ingest.add_argument("--glob", default="**/*.txt", help="File pattern for directories")
    ingest.add_argument("--chunk-size", type=_chunk_size, default="auto", help="'auto' or max characters")
    ingest.add_argument("--namespace", default=None, help="Target namespace, or 'auto' for per-document")
    ingest.add_argument(
        "--isolate-documents",
        action="store_true",
        help="Keep going (and keep counts) when one document fails",
    )

    search = sub.add_parser("search", help="Semantic search over one namespace")
    search.add_argument("query", help="Free-text query")
    search.add_argument("--top-k", type=_positive_int, default=None)
    search.add_argument("--namespace", default=None)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from doc_embedder.config import settings

    if args.command == "check":
        from doc_embedder.retrieval.base import check_connection, get_vector_store

        return 0 if check_connection(get_vector_store(settings)) else 1

    if args.command == "ingest":
        from doc_embedder.ingestion.pipeline import DocumentIngestor

        documents = None
        if args.paths:
            from doc_embedder.ingestion.loader import load_paths

            documents = load_paths(args.paths, glob=args.glob)
        opts = IngestionSettings(
            chunk_size=args.chunk_size,
            namespace=args.namespace or settings.default_namespace,
            isolate_documents=args.isolate_documents,
        )
        stats = DocumentIngestor().ingest(documents, opts)
        print(json.dumps(stats.model_dump()))
        return 0 if stats.errors == 0 else 1

    if args.command == "search":
        from doc_embedder.retrieval.retriever import SemanticRetriever

        result = SemanticRetriever(default_top_k=settings.default_top_k).search(
            args.query,
            top_k=args.top_k,
            namespace=args.namespace or settings.default_namespace,
        )
        if result is None:
            logger.error("Search failed")
            return 1
        for match in result.matches:
            print(match)
        return 0

    return 2  # unreachable: argparse enforces a command


if __name__ == "__main__":
    sys.exit(main())
