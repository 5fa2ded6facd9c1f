"""Abstract base class for text-embedding service providers.

Defines the contract for generating embedding vectors from text.  The
vector store treats the result as an opaque list of floats; it never looks
inside beyond computing cosine similarity.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: OpenAIEmbeddingProvider (OpenAI or Gemini via the
# OpenAI-compatible endpoint).  Located in: lectro/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by search and indexing."""

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            One or more text strings to embed.

        Returns
        -------
        list[list[float]]
            Embedding vectors corresponding positionally to *texts*.

        Raises
        ------
        lectro.utils.errors.ProviderError
            If the embedding API call fails.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string.

        Convenience wrapper around :meth:`embed` for the search-query case.
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the expected dimensionality of the embedding vectors.

        Example values: ``1536`` (``text-embedding-3-small``), ``768``
        (``text-embedding-004``).
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this embedding provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials for the provider are configured."""
