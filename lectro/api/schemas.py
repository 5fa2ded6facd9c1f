"""Pydantic request/response schemas for the Lectro API.

Defines the public contract for every REST endpoint: semantic search, the
vector store sync pair, embedding, RAG chat, server-side indexing and the
health check.

Field names on the wire are camelCase because the reader client shares them
with the on-disk store; Python attributes stay snake_case and
``populate_by_name`` accepts either spelling.  FastAPI serializes
``response_model`` output by alias, so responses come out camelCase too.

Convention: request schemas end with "Request", response schemas end with
"Response".
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from lectro.models.rag import ChatMessage, RagContext
from lectro.models.vectors import Chunk

_CAMEL = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class SearchRequest(BaseModel):
    """Body of ``POST /api/ai/search``.

    ``query`` defaults to empty so a missing query reaches the service and
    gets the same "Query is required" error as a blank one.  An omitted
    ``limit`` falls back to the configured ``search.default_limit``.
    """

    query: str = ""
    limit: int | None = Field(default=None, gt=0, le=1000)


class SearchResultItem(BaseModel):
    """One search hit.  ``id`` is the owning book id, not the chunk id."""

    model_config = _CAMEL

    id: str
    score: float | None = Field(description="Cosine similarity; null when undefined.")
    text: str = ""
    chapter_title: str | None = Field(default=None, alias="chapterTitle")


class SearchResponse(BaseModel):
    results: list[SearchResultItem]


# ---------------------------------------------------------------------------
# Vector store sync
# ---------------------------------------------------------------------------


class VectorsDocumentResponse(BaseModel):
    """Full store contents as sent to the reader client."""

    model_config = _CAMEL

    chunks: list[dict[str, Any]]
    last_sync: str | None = Field(default=None, alias="lastSync")


class MergeVectorsRequest(BaseModel):
    """Body of ``POST /api/library/vectors``."""

    model_config = _CAMEL

    chunks: list[Chunk] = Field(default_factory=list)
    deleted_book_ids: list[str] = Field(default_factory=list, alias="deletedBookIds")


class MergeVectorsResponse(BaseModel):
    success: bool = True
    count: int


# ---------------------------------------------------------------------------
# Embedding
# ---------------------------------------------------------------------------


class EmbedRequest(BaseModel):
    text: str = ""


class EmbedResponse(BaseModel):
    embedding: list[float]
    dimension: int


# ---------------------------------------------------------------------------
# RAG chat
# ---------------------------------------------------------------------------


class ChatRequest(BaseModel):
    """Body of ``POST /api/ai/chat``."""

    model_config = _CAMEL

    query: str = ""
    contexts: list[RagContext] = Field(default_factory=list)
    conversation_history: list[ChatMessage] = Field(
        default_factory=list, alias="conversationHistory"
    )
    model: str | None = Field(default=None, description="Per-request model override.")


class ChatResponse(BaseModel):
    model_config = _CAMEL

    response: str
    used_sources: list[RagContext] = Field(alias="usedSources")


# ---------------------------------------------------------------------------
# Server-side indexing
# ---------------------------------------------------------------------------


class ChapterInput(BaseModel):
    title: str = ""
    text: str


class IndexBookRequest(BaseModel):
    """Body of ``POST /api/library/index``."""

    model_config = _CAMEL

    book_id: str = Field(default="", alias="bookId")
    chapters: list[ChapterInput] = Field(default_factory=list)
    replace: bool = False


class IndexBookResponse(BaseModel):
    model_config = _CAMEL

    success: bool = True
    book_id: str = Field(alias="bookId")
    chunks_indexed: int = Field(alias="chunksIndexed")
    count: int


# ---------------------------------------------------------------------------
# Errors / health
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the error handlers."""

    model_config = _CAMEL

    error: str
    error_type: str = Field(alias="errorType")


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]
    store: dict[str, Any] = Field(default_factory=dict)
