"""Orchestrator for server-side book indexing.

Pipeline stages: **chunk -> embed -> store**.

The reader normally indexes books in the browser and posts the finished
chunks to ``/api/library/vectors``.  :class:`IndexingService` does the same
work on the server for clients that only have chapter text:

    1. TextChunker -- splits each chapter into overlapping windows
    2. IEmbeddingProvider -- embeds the windows in batches
    3. IVectorStoreProvider -- merges the new chunks into the store

Chunk ids are deterministic (``"{book_id}:{chapter_index}:{part_index}"``),
so indexing the same book twice overwrites rather than duplicates.  With
``replace=True`` the book's previous chunks are dropped in the same store
write that adds the new ones, which also clears windows left over from a
longer earlier version of a chapter.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import NamedTuple

import structlog

from lectro.interfaces.embedding_provider import IEmbeddingProvider
from lectro.interfaces.vector_store_provider import IVectorStoreProvider
from lectro.models.vectors import Chunk
from lectro.services.indexing.chunker import TextChunker
from lectro.utils.errors import ProviderError, ValidationError

logger = structlog.get_logger(logger_name=__name__)


class ChapterText(NamedTuple):
    """Plain text of one chapter, in reading order."""

    text: str
    title: str = ""


def chunk_id(book_id: str, chapter_index: int, part_index: int) -> str:
    return f"{book_id}:{chapter_index}:{part_index}"


class IndexingService:
    """Chunks, embeds and stores the chapters of one book.

    Parameters
    ----------
    chunker:
        Splits chapter text into windows.
    embedding_provider:
        Generates embedding vectors for window text.
    vector_store:
        Receives the finished chunks.
    batch_size:
        Number of windows sent to the embedding provider per call.
    """

    def __init__(
        self,
        chunker: TextChunker,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        batch_size: int = 100,
    ) -> None:
        self._chunker = chunker
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._batch_size = max(1, batch_size)

    async def index_book(
        self,
        book_id: str,
        chapters: Sequence[ChapterText],
        replace: bool = False,
    ) -> tuple[int, int]:
        """Index *chapters* of *book_id*.

        Returns
        -------
        tuple[int, int]
            ``(chunks_indexed, store_count)``: the number of chunks produced
            for this book and the total chunk count after the merge.

        Raises
        ------
        ValidationError
            If *book_id* is blank.
        ProviderError
            If embedding fails.  Nothing is written in that case, even with
            ``replace=True``.
        """
        if not book_id or not book_id.strip():
            raise ValidationError(message="bookId is required")

        start = time.monotonic()

        # Stage 1: chunk.  Keep chapter/part positions for the ids.
        pending: list[tuple[int, int, str, str]] = []
        for chapter_index, chapter in enumerate(chapters):
            for part_index, window in enumerate(self._chunker.split(chapter.text)):
                pending.append((chapter_index, part_index, chapter.title, window))

        if not pending:
            logger.warning("indexing_no_text", book_id=book_id, chapters=len(chapters))

        # Stage 2: embed in batches.  Everything is embedded before the store
        # is touched so a provider failure leaves the old index intact.
        embeddings: list[list[float]] = []
        for batch_start in range(0, len(pending), self._batch_size):
            batch = pending[batch_start : batch_start + self._batch_size]
            vectors = await self._embedding_provider.embed([item[3] for item in batch])
            if len(vectors) != len(batch):
                raise ProviderError(
                    message=f"Expected {len(batch)} embeddings, got {len(vectors)}",
                    provider_name=self._embedding_provider.get_provider_name(),
                )
            embeddings.extend(vectors)

        chunks: list[Chunk] = []
        for (chapter_index, part_index, title, window), vector in zip(pending, embeddings):
            fields = {
                "id": chunk_id(book_id, chapter_index, part_index),
                "bookId": book_id,
                "embedding": vector,
                "text": window,
                "chapterIndex": chapter_index,
            }
            if title:
                fields["chapterTitle"] = title
            chunks.append(Chunk.model_validate(fields))

        # Stage 3: store.  Replacement and upsert share one write.
        count = await self._vector_store.merge(
            chunks, replaced_book_ids=[book_id] if replace else ()
        )

        logger.info(
            "book_indexed",
            book_id=book_id,
            chapters=len(chapters),
            chunks=len(chunks),
            replace=replace,
            store_count=count,
            elapsed_s=round(time.monotonic() - start, 3),
        )
        return len(chunks), count
