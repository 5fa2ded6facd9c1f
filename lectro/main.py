"""Lectro FastAPI application entry point.

Wires together providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml``, configures
structured logging, and resolves the library root that holds the vector
store file.

Run with ``python -m lectro.main`` or ``uvicorn lectro.main:app``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from lectro import __version__
from lectro.api.middleware import (
    RequestLoggingMiddleware,
    configure_cors,
    install_error_handling,
)
from lectro.api.routes import router as api_router
from lectro.config.loader import load_config, resolve_library_path
from lectro.config.settings import Settings
from lectro.interfaces.embedding_provider import IEmbeddingProvider
from lectro.interfaces.llm_provider import ILLMProvider
from lectro.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from lectro.providers.llm.openai_provider import OpenAILLMProvider
from lectro.providers.vector_store.json_file_provider import JsonFileVectorStore
from lectro.services.chat_service import RagChatService
from lectro.services.indexing.chunker import TextChunker
from lectro.services.indexing.indexing_service import IndexingService
from lectro.services.search_service import SearchService
from lectro.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings.config_path, settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider | None:
    """Return the chat LLM, or ``None`` when no API key is configured.

    Priority: OpenAI / OpenAI-compatible -> Gemini.
    """
    provider = OpenAILLMProvider(settings=app_settings)
    if provider.is_available():
        return provider
    return None


def _build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider | None:
    """Return the embedding provider, or ``None`` when no API key is configured.

    Priority: OpenAI / OpenAI-compatible -> Gemini.
    """
    provider = OpenAIEmbeddingProvider(settings=app_settings)
    if provider.is_available():
        return provider
    return None


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, app_config: dict[str, Any]) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    Services that need a missing provider are stored as ``None``; the route
    dependencies turn that into a ``ConfigurationError`` per request.
    """
    search_cfg = app_config.get("search") or {}
    chat_cfg = app_config.get("chat") or {}
    indexing_cfg = app_config.get("indexing") or {}

    # -- Vector store --
    library_root = resolve_library_path(app_settings, app_config)
    vector_store = JsonFileVectorStore(
        library_root / app_settings.vectors_file_name,
        json_indent=app_settings.vectors_json_indent,
    )

    # -- Providers --
    embedding_provider = _build_embedding_provider(app_settings)
    llm_provider = _build_llm_provider(app_settings)

    # -- Services --
    search_service: SearchService | None = None
    indexing_service: IndexingService | None = None
    if embedding_provider is not None:
        search_service = SearchService(
            embedding_provider=embedding_provider,
            vector_store=vector_store,
            default_limit=int(search_cfg.get("default_limit", 20)),
        )
        indexing_service = IndexingService(
            chunker=TextChunker(
                chunk_size=int(indexing_cfg.get("chunk_size", 1000)),
                overlap=int(indexing_cfg.get("chunk_overlap", 200)),
                min_chapter_chars=int(indexing_cfg.get("min_chapter_chars", 50)),
            ),
            embedding_provider=embedding_provider,
            vector_store=vector_store,
            batch_size=int(indexing_cfg.get("embedding_batch_size", 100)),
        )

    chat_service: RagChatService | None = None
    if llm_provider is not None:
        chat_service = RagChatService(
            llm=llm_provider,
            search_service=search_service,
            context_limit=int(chat_cfg.get("context_limit", 8)),
            temperature=float(chat_cfg.get("temperature", 0.4)),
            max_tokens=int(chat_cfg.get("max_tokens", 2000)),
        )

    provider_registry: dict[str, Any] = {
        "embedding": embedding_provider is not None,
        "embedding_provider": (
            embedding_provider.get_provider_name() if embedding_provider else None
        ),
        "llm": llm_provider is not None,
        "llm_provider": llm_provider.get_provider_name() if llm_provider else None,
        "vector_store": vector_store.get_provider_name(),
    }

    return {
        "settings": app_settings,
        "library_root": library_root,
        "vector_store": vector_store,
        "embedding_provider": embedding_provider,
        "llm_provider": llm_provider,
        "search_service": search_service,
        "chat_service": chat_service,
        "indexing_service": indexing_service,
        "provider_registry": provider_registry,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup."""
    app_settings: Settings = application.state.settings
    components = _build_all(app_settings, application.state.config)

    for key, value in components.items():
        setattr(application.state, key, value)

    registry = components["provider_registry"]
    if not registry["embedding"]:
        _logger.warning(
            "embedding_provider_missing",
            message="Search, embed and index endpoints will return a configuration error.",
        )

    _logger.info(
        "app_startup",
        version=__version__,
        environment=app_settings.app_env,
        library_root=str(components["library_root"]),
        embedding=registry["embedding_provider"],
        llm=registry["llm_provider"],
    )

    yield

    _logger.info("app_shutdown")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    app_config: dict[str, Any] | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    *app_settings* and *app_config* default to the module-level values read
    from the environment and ``config/config.yaml``.
    """
    application = FastAPI(
        title="Lectro API",
        version=__version__,
        description=(
            "Semantic search, retrieval-augmented chat and vector store sync "
            "for a personal e-book library."
        ),
        lifespan=_lifespan,
    )
    application.state.settings = app_settings or settings
    application.state.config = app_config if app_config is not None else config

    # -- Middleware (order matters: last added = first executed) --
    install_error_handling(application)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "lectro.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
