"""OpenAI-compatible embedding provider adapter.

Wraps the ``openai`` async client to implement :class:`IEmbeddingProvider`.
Works against real OpenAI and against any OpenAI-compatible endpoint.  When
only ``GEMINI_API_KEY`` is configured the client points at Gemini's
OpenAI-compatibility base URL and defaults to ``text-embedding-004``, the
model the reader's indexer has always used.
"""

from __future__ import annotations

import openai
import structlog

from lectro.config.settings import Settings
from lectro.interfaces.embedding_provider import IEmbeddingProvider
from lectro.utils.errors import ProviderError

logger = structlog.get_logger(logger_name=__name__)

_OPENAI_BATCH_LIMIT = 2048

# Known embedding model dimensions.
_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
    "text-embedding-004": 768,
    "gemini-embedding-001": 3072,
}


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by an OpenAI-compatible embeddings API.

    Credential selection: ``OPENAI_API_KEY`` (with optional
    ``OPENAI_BASE_URL``) wins; otherwise ``GEMINI_API_KEY`` against
    ``GEMINI_BASE_URL``.  With neither set the provider reports itself
    unavailable and the application raises ``ConfigurationError`` when an
    embedding is requested.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

        client_kwargs: dict = {}
        if settings.openai_api_key:
            self._api_key = settings.openai_api_key
            self._model = settings.openai_embedding_model or "text-embedding-3-small"
            if settings.openai_base_url:
                client_kwargs["base_url"] = settings.openai_base_url
            self._provider_label = (
                "openai-compatible_embedding" if settings.openai_base_url else "openai_embedding"
            )
        else:
            self._api_key = settings.gemini_api_key
            self._model = settings.gemini_embedding_model
            client_kwargs["base_url"] = settings.gemini_base_url
            self._provider_label = "gemini_embedding"

        # The SDK refuses to build a client without a key; an unconfigured
        # provider keeps no client and fails in embed().
        self._client = (
            openai.AsyncOpenAI(api_key=self._api_key, **client_kwargs) if self._api_key else None
        )
        self._dimension = _MODEL_DIMENSIONS.get(self._model, 768)

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Automatically splits into batches of 2048 if the input exceeds the
        per-call limit.
        """
        if not texts:
            return []
        if self._client is None:
            raise ProviderError(
                message="Embedding API key is not configured",
                provider_name=self.get_provider_name(),
            )

        try:
            all_embeddings: list[list[float]] = []
            for start in range(0, len(texts), _OPENAI_BATCH_LIMIT):
                batch = texts[start : start + _OPENAI_BATCH_LIMIT]
                response = await self._client.embeddings.create(
                    input=batch,
                    model=self._model,
                )
                batch_embeddings = [list(item.embedding) for item in response.data]
                if len(batch_embeddings) != len(batch):
                    raise ProviderError(
                        message=(
                            f"{self._provider_label} returned {len(batch_embeddings)} "
                            f"embeddings for {len(batch)} inputs"
                        ),
                        provider_name=self.get_provider_name(),
                    )
                all_embeddings.extend(batch_embeddings)
                logger.info(
                    "openai_embedding_batch",
                    model=self._model,
                    provider=self._provider_label,
                    batch_size=len(batch),
                    tokens=response.usage.total_tokens if response.usage else None,
                )
            return all_embeddings
        except openai.APIError as exc:
            raise ProviderError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string."""
        result = await self.embed([text])
        return result[0]

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)
