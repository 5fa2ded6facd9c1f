"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources (in priority order):
#
#   1. **Environment variables** - e.g., GEMINI_API_KEY=abc123
#   2. **.env file** - key=value lines in the project root .env file
#
# Field name `lectro_library_path` maps to env var `LECTRO_LIBRARY_PATH`.
# Default values are used when neither source defines the field.
#
# Tuning knobs that are not secrets (search limits, chunk sizes) live in
# config/config.yaml instead; see lectro/config/loader.py.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class Settings(BaseSettings):
    """Lectro application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === LLM / Embedding Providers ===
    # Empty string = "not configured".  OpenAI takes priority; when only a
    # Gemini key is present the same OpenAI-compatible client is pointed at
    # Gemini's compatibility endpoint.
    openai_api_key: str = ""
    openai_base_url: str = ""  # Custom base URL for OpenAI-compatible APIs
    openai_text_model: str = ""
    openai_embedding_model: str = ""
    gemini_api_key: str = ""
    gemini_base_url: str = GEMINI_OPENAI_BASE_URL
    gemini_text_model: str = "gemini-1.5-flash"
    gemini_embedding_model: str = "text-embedding-004"

    # === Library / Vector Store ===
    lectro_library_path: str = ""
    vectors_file_name: str = "lectro_vectors.json"
    # None = compact JSON.  Indented output roughly doubles file size on
    # large libraries.
    vectors_json_indent: int | None = None

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    app_env: str = "development"
    log_level: str = "INFO"
    config_path: str = "config/config.yaml"

    def get_available_llm_providers(self) -> list[str]:
        """Return provider names that have non-empty API keys configured."""
        providers: list[str] = []
        if self.openai_api_key:
            providers.append("openai")
        if self.gemini_api_key:
            providers.append("gemini")
        return providers
