"""Unit tests for factory functions in lectro/main.py.

Covers provider selection, ``_build_all`` assembly and the ``create_app``
factory with its lifespan, all without real network calls.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from fastapi import FastAPI
from fastapi.testclient import TestClient

from conftest import make_settings
from lectro.main import _build_all, _build_embedding_provider, _build_llm_provider, create_app
from lectro.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from lectro.providers.llm.openai_provider import OpenAILLMProvider
from lectro.providers.vector_store.json_file_provider import JsonFileVectorStore
from lectro.services.chat_service import RagChatService
from lectro.services.indexing.indexing_service import IndexingService
from lectro.services.search_service import SearchService

_CONFIG = {
    "search": {"default_limit": 5},
    "chat": {"context_limit": 4, "temperature": 0.1, "max_tokens": 300},
    "indexing": {"chunk_size": 500, "chunk_overlap": 50, "embedding_batch_size": 10},
}


class TestProviderSelection:
    def test_no_keys_yields_none(self) -> None:
        settings = make_settings()
        assert _build_embedding_provider(settings) is None
        assert _build_llm_provider(settings) is None

    def test_gemini_key_builds_both(self) -> None:
        settings = make_settings(gemini_api_key="g-test")
        assert isinstance(_build_embedding_provider(settings), OpenAIEmbeddingProvider)
        assert isinstance(_build_llm_provider(settings), OpenAILLMProvider)


class TestBuildAll:
    def test_without_credentials(self, tmp_path: Path) -> None:
        settings = make_settings(lectro_library_path=str(tmp_path / "lib"))
        components = _build_all(settings, _CONFIG)

        store = components["vector_store"]
        assert isinstance(store, JsonFileVectorStore)
        assert store.path == tmp_path / "lib" / "lectro_vectors.json"
        assert components["search_service"] is None
        assert components["chat_service"] is None
        assert components["indexing_service"] is None
        assert components["provider_registry"]["embedding"] is False
        assert components["provider_registry"]["vector_store"] == "json_file"

    def test_with_credentials(self, tmp_path: Path) -> None:
        settings = make_settings(
            lectro_library_path=str(tmp_path), openai_api_key="sk-test"
        )
        with patch("lectro.providers.embedding.openai_embedding_provider.openai.AsyncOpenAI"), \
                patch("lectro.providers.llm.openai_provider.openai.AsyncOpenAI"):
            components = _build_all(settings, _CONFIG)

        assert isinstance(components["search_service"], SearchService)
        assert components["search_service"].default_limit == 5
        assert isinstance(components["chat_service"], RagChatService)
        assert isinstance(components["indexing_service"], IndexingService)
        assert components["provider_registry"]["llm_provider"] == "openai"

    def test_json_indent_passed_to_store(self, tmp_path: Path) -> None:
        settings = make_settings(lectro_library_path=str(tmp_path), vectors_json_indent=2)
        store = _build_all(settings, {})["vector_store"]
        assert store._json_indent == 2


class TestCreateApp:
    def test_returns_fastapi_with_routes(self, tmp_path: Path) -> None:
        app = create_app(make_settings(lectro_library_path=str(tmp_path)), _CONFIG)
        assert isinstance(app, FastAPI)
        paths = {route.path for route in app.routes}
        assert {"/api/ai/search", "/api/library/vectors", "/api/health"} <= paths

    def test_lifespan_populates_state(self, tmp_path: Path) -> None:
        app = create_app(make_settings(lectro_library_path=str(tmp_path)), _CONFIG)
        with TestClient(app) as client:
            response = client.get("/api/health")
            assert app.state.library_root == tmp_path

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["store"]["total_chunks"] == 0
