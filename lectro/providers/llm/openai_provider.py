"""OpenAI-compatible LLM provider adapter.

Wraps the ``openai`` async client to implement :class:`ILLMProvider`.  The
same adapter serves OpenAI itself, any OpenAI-compatible endpoint set via
``OPENAI_BASE_URL``, and Gemini through its OpenAI-compatibility URL when
only ``GEMINI_API_KEY`` is configured.
"""

from __future__ import annotations

import openai
import structlog

from lectro.config.settings import Settings
from lectro.interfaces.llm_provider import ILLMProvider
from lectro.utils.errors import ProviderError

logger = structlog.get_logger(logger_name=__name__)


class OpenAILLMProvider(ILLMProvider):
    """LLM provider backed by an OpenAI-compatible chat completions API.

    Defaults to ``gpt-4o-mini`` on OpenAI and ``gemini-1.5-flash`` on Gemini.
    Callers may pass ``model`` per request to override the default.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

        # 25s total so a slow model fails cleanly before proxies drop the
        # connection.
        client_kwargs: dict = {"timeout": openai.Timeout(25.0, connect=5.0)}
        if settings.openai_api_key:
            self._api_key = settings.openai_api_key
            self._text_model = settings.openai_text_model or "gpt-4o-mini"
            if settings.openai_base_url:
                client_kwargs["base_url"] = settings.openai_base_url
            self._provider_label = "openai-compatible" if settings.openai_base_url else "openai"
        else:
            self._api_key = settings.gemini_api_key
            self._text_model = settings.gemini_text_model
            client_kwargs["base_url"] = settings.gemini_base_url
            self._provider_label = "gemini"

        self._client = (
            openai.AsyncOpenAI(api_key=self._api_key, **client_kwargs) if self._api_key else None
        )

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 2000,
        model: str | None = None,
    ) -> str:
        """Generate a text completion via the chat completions API."""
        if self._client is None:
            raise ProviderError(
                message="LLM API key is not configured",
                provider_name=self.get_provider_name(),
            )

        model_name = model or self._text_model
        try:
            response = await self._client.chat.completions.create(
                model=model_name,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APITimeoutError as exc:
            raise ProviderError(
                message=f"{self._provider_label} timed out after 25s",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIError as exc:
            raise ProviderError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ProviderError(
                message=f"{self._provider_label} returned empty response",
                provider_name=self.get_provider_name(),
            )
        logger.info(
            "openai_completion",
            model=model_name,
            provider=self._provider_label,
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return content

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured (doesn't verify it works)."""
        return bool(self._api_key)
