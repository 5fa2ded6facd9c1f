"""Public interface definitions for Lectro's external collaborators.

Every external API or storage backend is accessed through the abstract base
classes defined here.  Concrete adapters live in ``lectro/providers/`` and
are wired together in ``lectro/main.py`` at application startup, so tests
can inject mocks and backends can be swapped without touching services.

    Interface              →  Concrete implementations (in lectro/providers/)
    ─────────────────────────────────────────────────────────────────────
    IEmbeddingProvider     →  OpenAIEmbeddingProvider
    ILLMProvider           →  OpenAILLMProvider
    IVectorStoreProvider   →  JsonFileVectorStore
"""

from lectro.interfaces.embedding_provider import IEmbeddingProvider
from lectro.interfaces.llm_provider import ILLMProvider
from lectro.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "IEmbeddingProvider",
    "ILLMProvider",
    "IVectorStoreProvider",
]
