"""Semantic search over the library's vector store.

Embeds the query text with the configured embedding provider and ranks the
stored chunks by cosine similarity.  Provider failures propagate unchanged;
a failed embedding never degrades into a default vector.
"""

from __future__ import annotations

import structlog

from lectro.interfaces.embedding_provider import IEmbeddingProvider
from lectro.interfaces.vector_store_provider import IVectorStoreProvider
from lectro.models.vectors import SearchHit
from lectro.utils.errors import ValidationError
from lectro.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

DEFAULT_SEARCH_LIMIT = 20


class SearchService:
    """Query-text search: embed, then rank against the store."""

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        default_limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._default_limit = default_limit

    @property
    def default_limit(self) -> int:
        return self._default_limit

    async def search(self, query: str, limit: int | None = None) -> list[SearchHit]:
        """Return the top *limit* chunks for *query*.

        Raises
        ------
        ValidationError
            If *query* is empty or whitespace only.
        """
        if not query or not query.strip():
            raise ValidationError(message="Query is required")

        effective_limit = self._default_limit if limit is None else limit
        query_embedding = await self._embedding_provider.embed_single(query)
        hits = await self._vector_store.search(query_embedding, effective_limit)

        logger.info(
            "search_completed",
            query_length=len(query),
            limit=effective_limit,
            results=len(hits),
        )
        return hits
