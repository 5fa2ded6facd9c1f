"""Shared pytest fixtures for the Lectro test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from lectro.config.settings import Settings
from lectro.interfaces.embedding_provider import IEmbeddingProvider
from lectro.interfaces.llm_provider import ILLMProvider
from lectro.models.vectors import Chunk
from lectro.providers.vector_store.json_file_provider import JsonFileVectorStore

# Provider credentials that may be exported in a developer shell.
_PROVIDER_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_TEXT_MODEL",
    "OPENAI_EMBEDDING_MODEL",
    "GEMINI_API_KEY",
    "LECTRO_LIBRARY_PATH",
    "VECTORS_JSON_INDENT",
)


@pytest.fixture(autouse=True)
def _isolate_provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def make_settings(**overrides: Any) -> Settings:
    """Build a Settings instance that ignores any local .env file."""
    defaults: dict[str, Any] = {
        "openai_api_key": "",
        "openai_base_url": "",
        "openai_text_model": "",
        "openai_embedding_model": "",
        "gemini_api_key": "",
        "lectro_library_path": "",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def make_chunk(
    chunk_id: str,
    book_id: str,
    embedding: list[float],
    text: str = "",
    **extra: Any,
) -> Chunk:
    """Build a Chunk from wire-format field names."""
    data: dict[str, Any] = {
        "id": chunk_id,
        "bookId": book_id,
        "embedding": embedding,
        "text": text or f"text of {chunk_id}",
    }
    data.update(extra)
    return Chunk.model_validate(data)


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def vectors_path(tmp_path: Path) -> Path:
    return tmp_path / "library" / "lectro_vectors.json"


@pytest.fixture
def store(vectors_path: Path) -> JsonFileVectorStore:
    return JsonFileVectorStore(vectors_path)


@pytest.fixture
def sample_chunks() -> list[Chunk]:
    """Two books, orthogonal embeddings."""
    return [
        make_chunk("a", "b1", [1.0, 0.0], "Call me Ishmael.", chapterTitle="Loomings"),
        make_chunk("c", "b2", [0.0, 1.0], "It was the best of times."),
    ]


# ---------------------------------------------------------------------------
# Provider mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_embedding_provider() -> MagicMock:
    """Embedding provider that maps every text to ``[1.0, 0.0]``."""
    provider = MagicMock(spec=IEmbeddingProvider)
    provider.embed = AsyncMock(side_effect=lambda texts: [[1.0, 0.0] for _ in texts])
    provider.embed_single = AsyncMock(return_value=[1.0, 0.0])
    provider.get_dimension.return_value = 2
    provider.get_provider_name.return_value = "mock_embedding"
    provider.is_available.return_value = True
    return provider


@pytest.fixture
def mock_llm() -> MagicMock:
    llm = MagicMock(spec=ILLMProvider)
    llm.complete = AsyncMock(return_value="Moby-Dick explores obsession.")
    llm.get_provider_name.return_value = "mock_llm"
    llm.is_available.return_value = True
    return llm
