"""FastAPI API routes for Lectro.

Service dependencies are resolved from ``app.state`` (populated at startup by
``lectro.main._build_all``) through ``Depends`` helpers using the
``Annotated`` pattern.  Endpoints that need a provider the deployment has no
credentials for fail with ``ConfigurationError`` rather than a 404.

    Endpoint                  Method  Description
    ─────────────────────────────────────────────────────────────────
    /api/ai/search            POST    Semantic search over stored chunks
    /api/ai/embed             POST    Embed one text
    /api/ai/chat              POST    RAG answer from library excerpts
    /api/library/vectors      GET     Full vector store contents
    /api/library/vectors      POST    Upsert chunks / delete books
    /api/library/index        POST    Chunk, embed and store a book
    /api/health               GET     Health check + provider status
"""

from __future__ import annotations

import math
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Request

from lectro import __version__
from lectro.api.schemas import (
    ChatRequest,
    ChatResponse,
    EmbedRequest,
    EmbedResponse,
    HealthResponse,
    IndexBookRequest,
    IndexBookResponse,
    MergeVectorsRequest,
    MergeVectorsResponse,
    SearchRequest,
    SearchResponse,
    SearchResultItem,
    VectorsDocumentResponse,
)
from lectro.interfaces.embedding_provider import IEmbeddingProvider
from lectro.interfaces.vector_store_provider import IVectorStoreProvider
from lectro.services.chat_service import RagChatService
from lectro.services.indexing.indexing_service import ChapterText, IndexingService
from lectro.services.search_service import SearchService
from lectro.utils.errors import ConfigurationError, LectroError, ValidationError
from lectro.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api")


# ---------------------------------------------------------------------------
# Dependency helpers
# ---------------------------------------------------------------------------

_MISSING_EMBEDDING_KEY = "No embedding provider configured (set OPENAI_API_KEY or GEMINI_API_KEY)"
_MISSING_LLM_KEY = "No LLM provider configured (set OPENAI_API_KEY or GEMINI_API_KEY)"


def _get_vector_store(request: Request) -> IVectorStoreProvider:
    return request.app.state.vector_store


def _get_embedding_provider(request: Request) -> IEmbeddingProvider:
    provider = getattr(request.app.state, "embedding_provider", None)
    if provider is None:
        raise ConfigurationError(message=_MISSING_EMBEDDING_KEY)
    return provider


def _get_search_service(request: Request) -> SearchService:
    service = getattr(request.app.state, "search_service", None)
    if service is None:
        raise ConfigurationError(message=_MISSING_EMBEDDING_KEY)
    return service


def _get_chat_service(request: Request) -> RagChatService:
    service = getattr(request.app.state, "chat_service", None)
    if service is None:
        raise ConfigurationError(message=_MISSING_LLM_KEY)
    return service


def _get_indexing_service(request: Request) -> IndexingService:
    service = getattr(request.app.state, "indexing_service", None)
    if service is None:
        raise ConfigurationError(message=_MISSING_EMBEDDING_KEY)
    return service


VectorStoreDep = Annotated[IVectorStoreProvider, Depends(_get_vector_store)]
EmbeddingDep = Annotated[IEmbeddingProvider, Depends(_get_embedding_provider)]
SearchServiceDep = Annotated[SearchService, Depends(_get_search_service)]
ChatServiceDep = Annotated[RagChatService, Depends(_get_chat_service)]
IndexingServiceDep = Annotated[IndexingService, Depends(_get_indexing_service)]


# ---------------------------------------------------------------------------
# AI endpoints
# ---------------------------------------------------------------------------


@router.post("/ai/search", response_model=SearchResponse, summary="Semantic search")
async def search(body: SearchRequest, search_service: SearchServiceDep) -> SearchResponse:
    """Rank stored chunks against the query; undefined scores come back as null."""
    hits = await search_service.search(body.query, body.limit)
    return SearchResponse(
        results=[
            SearchResultItem(
                id=hit.book_id,
                score=None if math.isnan(hit.score) else hit.score,
                text=hit.text,
                chapter_title=hit.chapter_title,
            )
            for hit in hits
        ]
    )


@router.post("/ai/embed", response_model=EmbedResponse, summary="Embed one text")
async def embed(body: EmbedRequest, embedding_provider: EmbeddingDep) -> EmbedResponse:
    if not body.text or not body.text.strip():
        raise ValidationError(message="Text is required")
    vector = await embedding_provider.embed_single(body.text)
    return EmbedResponse(embedding=vector, dimension=len(vector))


@router.post("/ai/chat", response_model=ChatResponse, summary="Answer from library excerpts")
async def chat(body: ChatRequest, chat_service: ChatServiceDep) -> ChatResponse:
    answer = await chat_service.answer(
        body.query,
        contexts=body.contexts,
        history=body.conversation_history,
        model=body.model,
    )
    return ChatResponse(response=answer.response, used_sources=answer.used_sources)


# ---------------------------------------------------------------------------
# Library endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/library/vectors",
    response_model=VectorsDocumentResponse,
    summary="Full vector store contents",
)
async def get_vectors(vector_store: VectorStoreDep) -> VectorsDocumentResponse:
    snapshot = await vector_store.load()
    return VectorsDocumentResponse.model_validate(snapshot.to_document())


@router.post(
    "/library/vectors",
    response_model=MergeVectorsResponse,
    summary="Upsert chunks and delete books",
)
async def merge_vectors(
    body: MergeVectorsRequest, vector_store: VectorStoreDep
) -> MergeVectorsResponse:
    count = await vector_store.merge(body.chunks, body.deleted_book_ids)
    return MergeVectorsResponse(success=True, count=count)


@router.post(
    "/library/index",
    response_model=IndexBookResponse,
    summary="Chunk, embed and store a book's chapters",
)
async def index_book(
    body: IndexBookRequest, indexing_service: IndexingServiceDep
) -> IndexBookResponse:
    chunks_indexed, count = await indexing_service.index_book(
        body.book_id,
        [ChapterText(text=chapter.text, title=chapter.title) for chapter in body.chapters],
        replace=body.replace,
    )
    return IndexBookResponse(
        success=True,
        book_id=body.book_id,
        chunks_indexed=chunks_indexed,
        count=count,
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse, summary="Application health check")
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, provider availability and store stats.

    ``degraded`` means the store is readable but a provider is unconfigured;
    ``unhealthy`` means the store cannot be read.
    """
    providers: dict[str, Any] = dict(getattr(request.app.state, "provider_registry", {}))

    store: dict[str, Any] = {}
    store_ok = False
    vector_store = getattr(request.app.state, "vector_store", None)
    if vector_store is not None:
        try:
            stats = await vector_store.get_stats()
            store = stats.model_dump(mode="json")
            store_ok = True
        except LectroError as exc:
            logger.error("health_store_unreadable", error=str(exc))
            store = {"error": exc.message}

    if not store_ok:
        status = "unhealthy"
    elif providers.get("embedding") and providers.get("llm"):
        status = "healthy"
    else:
        status = "degraded"

    return HealthResponse(status=status, version=__version__, providers=providers, store=store)
