"""Vector store data models.

Defines the Pydantic v2 models for the on-disk vector index: the
:class:`Chunk` record (one embedded span of book text), the persisted
:class:`VectorStoreSnapshot`, and the :class:`SearchHit` produced by
similarity search.  All models are frozen.

Wire and disk field names are camelCase (``bookId``, ``chapterTitle``,
``lastSync``) because the reader client and the JSON file share them; the
Python attributes are snake_case.  ``populate_by_name`` lets code build
models with either spelling.

The on-disk document looks like::

    {
      "chunks": [
        {"id": "b1:0:0", "bookId": "b1", "embedding": [0.1, ...],
         "text": "...", "chapterTitle": "Chapter 1", "chapterIndex": 0}
      ],
      "lastSync": "2026-10-17T09:30:00.000000Z"
    }
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def format_timestamp(value: datetime) -> str:
    """Render *value* as an ISO-8601 UTC string with a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)  # noqa: UP017
    utc = value.astimezone(timezone.utc)  # noqa: UP017
    return utc.isoformat(timespec="microseconds").replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Chunk - the unit of indexed content.
# ---------------------------------------------------------------------------
class Chunk(BaseModel):
    """One embedded span of book text.

    ``id`` is the upsert key: re-submitting a chunk with the same id replaces
    the stored one.  Fields the reader client attaches beyond the ones
    declared here (``chapterIndex``, ``startCfi``, ``endCfi``) are kept as
    model extras and written back unchanged.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    id: str = Field(min_length=1, description="Stable unique chunk identifier.")
    book_id: str = Field(alias="bookId", min_length=1, description="Owning book.")
    embedding: list[float] = Field(description="Embedding vector; length is not enforced.")
    text: str = Field(default="", description="Source text represented by the embedding.")
    chapter_title: str | None = Field(
        default=None,
        alias="chapterTitle",
        description="Display metadata for the chapter the text came from.",
    )

    def to_record(self) -> dict[str, Any]:
        """Return the camelCase dict written to disk and sent to clients.

        ``chapterTitle`` is omitted when it was never supplied so records
        round-trip without gaining keys.
        """
        record = self.model_dump(by_alias=True)
        if "chapter_title" not in self.model_fields_set:
            record.pop("chapterTitle", None)
        return record


# ---------------------------------------------------------------------------
# VectorStoreSnapshot - the whole persisted document.
# ---------------------------------------------------------------------------
class VectorStoreSnapshot(BaseModel):
    """The complete store: every chunk plus the time of the last write.

    ``last_sync`` is ``None`` when nothing has been written yet.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    chunks: list[Chunk] = Field(default_factory=list)
    last_sync: datetime | None = Field(default=None, alias="lastSync")

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready document (``chunks`` + ``lastSync``)."""
        return {
            "chunks": [chunk.to_record() for chunk in self.chunks],
            "lastSync": format_timestamp(self.last_sync) if self.last_sync else None,
        }


# ---------------------------------------------------------------------------
# SearchHit - a scored search result.
# ---------------------------------------------------------------------------
class SearchHit(BaseModel):
    """A chunk scored against a query embedding.

    ``score`` is NaN when the similarity is undefined (a zero-magnitude
    vector or a dimension mismatch); such hits rank after every real score.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    book_id: str = Field(alias="bookId")
    score: float
    text: str = ""
    chapter_title: str | None = Field(default=None, alias="chapterTitle")


class VectorStoreStats(BaseModel):
    """Aggregate numbers about the store, used by /health and the CLI."""

    model_config = ConfigDict(frozen=True)

    total_chunks: int = 0
    total_books: int = 0
    dimensions: list[int] = Field(
        default_factory=list,
        description="Distinct embedding lengths seen; more than one means mixed models.",
    )
    last_sync: datetime | None = None
    file_size_bytes: int = 0
