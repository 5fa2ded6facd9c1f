"""Command-line management of the library's vector store.

Usage::

    python -m lectro.cli stats

    python -m lectro.cli search "whale hunting" --limit 5

    python -m lectro.cli index --book-id moby-dick \\
        --file ch01.txt --file ch02.txt --replace

    python -m lectro.cli delete --book-id moby-dick --yes

``--library`` overrides the library root for one invocation; otherwise it
is resolved exactly as the server resolves it (``LECTRO_LIBRARY_PATH``,
then ``library.path`` in ``config/config.yaml``, then ``./library``).

``stats`` and ``delete`` only touch the store file.  ``search`` and
``index`` also need an embedding provider (``OPENAI_API_KEY`` or
``GEMINI_API_KEY``).
"""

from __future__ import annotations

import argparse
import asyncio
import math
import sys
from pathlib import Path
from typing import Any

from lectro.config.loader import load_config, resolve_library_path
from lectro.config.settings import Settings
from lectro.models.vectors import format_timestamp
from lectro.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from lectro.providers.vector_store.json_file_provider import JsonFileVectorStore
from lectro.services.indexing.chunker import TextChunker
from lectro.services.indexing.indexing_service import ChapterText, IndexingService
from lectro.services.search_service import SearchService
from lectro.utils.errors import LectroError
from lectro.utils.logging import configure_logging

_NO_EMBEDDING_PROVIDER = (
    "No embedding provider available.\n"
    "Set one of:\n"
    "  OPENAI_API_KEY  (optionally with OPENAI_BASE_URL)\n"
    "  GEMINI_API_KEY  (uses text-embedding-004)\n"
)


def _build_store(
    app_settings: Settings, app_config: dict[str, Any], library: str | None
) -> JsonFileVectorStore:
    if library:
        root = Path(library).expanduser()
    else:
        root = resolve_library_path(app_settings, app_config)
    return JsonFileVectorStore(
        root / app_settings.vectors_file_name,
        json_indent=app_settings.vectors_json_indent,
    )


def _build_embedding_provider(app_settings: Settings) -> OpenAIEmbeddingProvider | None:
    provider = OpenAIEmbeddingProvider(settings=app_settings)
    return provider if provider.is_available() else None


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


async def _handle_stats(store: JsonFileVectorStore) -> int:
    stats = await store.get_stats()

    print("Vector Store Statistics")
    print("=" * 40)
    print(f"  File:             {store.path}")
    print(f"  Total chunks:     {stats.total_chunks}")
    print(f"  Total books:      {stats.total_books}")
    dims = ", ".join(str(d) for d in stats.dimensions) or "-"
    print(f"  Dimensions:       {dims}")
    if len(stats.dimensions) > 1:
        print("  Warning: mixed embedding lengths; re-index with one model.")
    last_sync = format_timestamp(stats.last_sync) if stats.last_sync else "never"
    print(f"  Last sync:        {last_sync}")
    print(f"  File size:        {stats.file_size_bytes} bytes")
    return 0


async def _handle_search(
    args: argparse.Namespace,
    store: JsonFileVectorStore,
    app_settings: Settings,
    app_config: dict[str, Any],
) -> int:
    embedding_provider = _build_embedding_provider(app_settings)
    if embedding_provider is None:
        print(f"Error: {_NO_EMBEDDING_PROVIDER}", file=sys.stderr)
        return 1

    search_cfg = app_config.get("search") or {}
    service = SearchService(
        embedding_provider=embedding_provider,
        vector_store=store,
        default_limit=int(search_cfg.get("default_limit", 20)),
    )
    hits = await service.search(args.query, args.limit)
    if not hits:
        print("No results.")
        return 0

    for rank, hit in enumerate(hits, start=1):
        score = "n/a" if math.isnan(hit.score) else f"{hit.score:.4f}"
        chapter = f" / {hit.chapter_title}" if hit.chapter_title else ""
        print(f"{rank:>3}. [{score}] {hit.book_id}{chapter}")
        preview = hit.text[:160].replace("\n", " ")
        print(f"     {preview}")
    return 0


async def _handle_index(
    args: argparse.Namespace,
    store: JsonFileVectorStore,
    app_settings: Settings,
    app_config: dict[str, Any],
) -> int:
    embedding_provider = _build_embedding_provider(app_settings)
    if embedding_provider is None:
        print(f"Error: {_NO_EMBEDDING_PROVIDER}", file=sys.stderr)
        return 1

    chapters: list[ChapterText] = []
    for file_name in args.file:
        path = Path(file_name)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            print(f"Error: cannot read {path}: {exc}", file=sys.stderr)
            return 1
        chapters.append(ChapterText(text=text, title=path.stem))

    indexing_cfg = app_config.get("indexing") or {}
    service = IndexingService(
        chunker=TextChunker(
            chunk_size=int(indexing_cfg.get("chunk_size", 1000)),
            overlap=int(indexing_cfg.get("chunk_overlap", 200)),
            min_chapter_chars=int(indexing_cfg.get("min_chapter_chars", 50)),
        ),
        embedding_provider=embedding_provider,
        vector_store=store,
        batch_size=int(indexing_cfg.get("embedding_batch_size", 100)),
    )

    print(f"Indexing book: {args.book_id} ({len(chapters)} chapter file(s))")
    chunks_indexed, count = await service.index_book(
        args.book_id, chapters, replace=args.replace
    )
    print("\nIndexing complete:")
    print(f"  Chunks indexed:   {chunks_indexed}")
    print(f"  Store total:      {count}")
    return 0


async def _handle_delete(args: argparse.Namespace, store: JsonFileVectorStore) -> int:
    book_ids = list(dict.fromkeys(args.book_id))
    wanted = set(book_ids)
    snapshot = await store.load()
    matching = sum(1 for chunk in snapshot.chunks if chunk.book_id in wanted)
    if matching == 0:
        print(f"No chunks found for {', '.join(book_ids)}. Nothing to delete.")
        return 0

    print(f"  Found {matching} chunks for {', '.join(book_ids)}")
    if not args.yes:
        answer = input("  Delete them? [y/N] ").strip().lower()
        if answer not in ("y", "yes"):
            print("  Aborted.")
            return 1

    remaining = await store.delete_books(book_ids)
    print(f"\n  Deleted {matching} chunks; {remaining} remain.")
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m lectro.cli",
        description="Manage the Lectro vector store (lectro_vectors.json).",
    )
    parser.add_argument(
        "--library",
        default=None,
        help="Library root directory (overrides LECTRO_LIBRARY_PATH and config)",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("stats", help="Show vector store statistics")

    search_parser = subparsers.add_parser("search", help="Semantic search over stored chunks")
    search_parser.add_argument("query", help="Query text")
    search_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum results (default: search.default_limit from config)",
    )

    index_parser = subparsers.add_parser("index", help="Index plain-text chapter files")
    index_parser.add_argument("--book-id", required=True, help="Book identifier")
    index_parser.add_argument(
        "--file",
        required=True,
        action="append",
        help="Chapter text file (repeat in reading order)",
    )
    index_parser.add_argument(
        "--replace",
        action="store_true",
        help="Delete the book's existing chunks first",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete every chunk of a book")
    delete_parser.add_argument(
        "--book-id", required=True, action="append", help="Book identifier (repeatable)"
    )
    delete_parser.add_argument("--yes", action="store_true", help="Skip confirmation")

    return parser


async def _run(args: argparse.Namespace, app_settings: Settings, app_config: dict[str, Any]) -> int:
    store = _build_store(app_settings, app_config, args.library)

    if args.command == "stats":
        return await _handle_stats(store)
    if args.command == "search":
        return await _handle_search(args, store, app_settings, app_config)
    if args.command == "index":
        return await _handle_index(args, store, app_settings, app_config)
    return await _handle_delete(args, store)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point; exits with the handler's status code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level="WARNING", to_stderr=True)

    try:
        app_config = load_config(app_settings.config_path, app_settings)
        exit_code = asyncio.run(_run(args, app_settings, app_config))
    except LectroError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
