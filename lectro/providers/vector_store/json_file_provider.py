"""Flat-file JSON vector store.

Implements :class:`IVectorStoreProvider` on top of a single JSON document
(``<library root>/lectro_vectors.json``).  Every operation reads the whole
file; every write replaces it.  That keeps the store dependency-free and
easy to inspect, at the cost of a hard scalability ceiling: libraries with
millions of chunks should move to a real vector database behind the same
interface.

Writes on one store instance are serialized with an ``asyncio.Lock`` and go
through a uniquely named, fsynced sibling temp file (``tempfile.mkstemp``)
that is ``os.replace``d into place, so readers never see a half-written
document.  Separate processes writing the same file still race (last
writer wins).

File I/O is synchronous ``json`` work and runs in ``asyncio.to_thread``.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from pathlib import Path

import pydantic
import structlog

from lectro.interfaces.vector_store_provider import IVectorStoreProvider
from lectro.models.vectors import Chunk, SearchHit, VectorStoreSnapshot, VectorStoreStats
from lectro.utils.errors import ReadError, ValidationError, WriteError
from lectro.utils.similarity import rank_chunks

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "json_file"


def merge_chunks(
    existing: Iterable[Chunk],
    incoming: Iterable[Chunk],
    deleted_book_ids: set[str],
    replaced_book_ids: set[str] | None = None,
) -> list[Chunk]:
    """Upsert *incoming* over *existing* by id, then drop deleted books.

    Incoming chunks replace existing ones with the same id.  Deletion runs
    last, so it also removes incoming chunks that belong to a deleted book.
    Existing chunks of *replaced_book_ids* are dropped before the upsert, so
    only the incoming chunks of those books survive.
    """
    replaced = replaced_book_ids or set()
    by_id: dict[str, Chunk] = {
        chunk.id: chunk for chunk in existing if chunk.book_id not in replaced
    }
    for chunk in incoming:
        by_id[chunk.id] = chunk

    if deleted_book_ids:
        by_id = {
            chunk_id: chunk
            for chunk_id, chunk in by_id.items()
            if chunk.book_id not in deleted_book_ids
        }

    return list(by_id.values())


class JsonFileVectorStore(IVectorStoreProvider):
    """Vector store persisted as one JSON document on disk.

    Parameters
    ----------
    path:
        Full path of the JSON document.  The containing directory is created
        on first write.
    json_indent:
        ``None`` writes compact JSON; an integer pretty-prints with that
        indent (useful for debugging small libraries).
    """

    def __init__(self, path: str | Path, json_indent: int | None = None) -> None:
        self._path = Path(path)
        self._json_indent = json_indent
        self._write_lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # IVectorStoreProvider implementation
    # ------------------------------------------------------------------

    async def load(self) -> VectorStoreSnapshot:
        return await asyncio.to_thread(self._read_snapshot)

    async def merge(
        self,
        incoming: Sequence[Chunk],
        deleted_book_ids: Iterable[str] = (),
        replaced_book_ids: Iterable[str] = (),
    ) -> int:
        incoming = list(incoming)
        deleted = set(deleted_book_ids)
        replaced = set(replaced_book_ids)

        async with self._write_lock:
            existing = await asyncio.to_thread(self._read_snapshot)
            logger.info(
                "vectors_merge",
                incoming=len(incoming),
                existing=len(existing.chunks),
                deleted_books=len(deleted),
                replaced_books=len(replaced),
            )
            merged = merge_chunks(existing.chunks, incoming, deleted, replaced)
            snapshot = VectorStoreSnapshot(
                chunks=merged,
                last_sync=datetime.now(tz=timezone.utc),  # noqa: UP017
            )
            await asyncio.to_thread(self._write_snapshot, snapshot)

        logger.info("vectors_saved", total=len(merged), path=str(self._path))
        return len(merged)

    async def delete_books(self, book_ids: Iterable[str]) -> int:
        """Remove every chunk owned by *book_ids*; returns the remaining count."""
        return await self.merge([], book_ids)

    async def search(self, query_embedding: Sequence[float], limit: int) -> list[SearchHit]:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValidationError(
                message=f"limit must be a positive integer, got {limit!r}",
                provider_name=_PROVIDER_NAME,
            )

        snapshot = await self.load()
        hits, mismatched = rank_chunks(snapshot.chunks, query_embedding, limit)
        if mismatched:
            logger.warning(
                "vectors_dimension_mismatch",
                mismatched=mismatched,
                query_dimension=len(query_embedding),
                msg="Chunks with a different embedding length scored NaN.",
            )
        logger.debug("vectors_search", scanned=len(snapshot.chunks), returned=len(hits))
        return hits

    async def get_stats(self) -> VectorStoreStats:
        snapshot = await self.load()
        try:
            file_size = self._path.stat().st_size
        except FileNotFoundError:
            file_size = 0

        return VectorStoreStats(
            total_chunks=len(snapshot.chunks),
            total_books=len({chunk.book_id for chunk in snapshot.chunks}),
            dimensions=sorted({len(chunk.embedding) for chunk in snapshot.chunks}),
            last_sync=snapshot.last_sync,
            file_size_bytes=file_size,
        )

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    def is_available(self) -> bool:
        """Return ``True`` if the store file's directory exists."""
        return self._path.parent.is_dir()

    # ------------------------------------------------------------------
    # Synchronous file I/O (run via asyncio.to_thread)
    # ------------------------------------------------------------------

    def _read_snapshot(self) -> VectorStoreSnapshot:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return VectorStoreSnapshot()
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error("vectors_read_failed", path=str(self._path), error=str(exc))
            raise ReadError(
                message=f"Index read failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        if not isinstance(data, dict):
            raise ReadError(
                message="Index read failed: top-level JSON value is not an object",
                provider_name=_PROVIDER_NAME,
            )

        try:
            return VectorStoreSnapshot.model_validate(
                {"chunks": data.get("chunks") or [], "lastSync": data.get("lastSync")}
            )
        except pydantic.ValidationError as exc:
            logger.error(
                "vectors_read_invalid",
                path=str(self._path),
                errors=exc.error_count(),
            )
            raise ReadError(
                message=f"Index read failed: {exc.error_count()} invalid record field(s)",
                provider_name=_PROVIDER_NAME,
            ) from exc

    def _write_snapshot(self, snapshot: VectorStoreSnapshot) -> None:
        try:
            payload = json.dumps(
                snapshot.to_document(),
                indent=self._json_indent,
                allow_nan=False,
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as exc:
            raise WriteError(
                message=f"Failed to serialize vectors: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # Unique per write, so two stores on one path never share a temp file.
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
        except OSError as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            logger.error("vectors_write_failed", path=str(self._path), error=str(exc))
            raise WriteError(
                message=f"Failed to save vectors: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc
