"""Unit tests for the OpenAI-compatible LLM provider."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import openai
import pytest

from conftest import make_settings
from lectro.providers.llm.openai_provider import OpenAILLMProvider
from lectro.utils.errors import ProviderError

_CLIENT_PATH = "lectro.providers.llm.openai_provider.openai.AsyncOpenAI"


def _completion(content: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    response.usage = MagicMock(total_tokens=42)
    return response


class TestOpenAILLMProvider:
    def test_openai_defaults(self) -> None:
        with patch(_CLIENT_PATH):
            provider = OpenAILLMProvider(make_settings(openai_api_key="sk-test"))
        assert provider.get_provider_name() == "openai"
        assert provider.is_available() is True

    def test_gemini_fallback(self) -> None:
        with patch(_CLIENT_PATH) as client_cls:
            provider = OpenAILLMProvider(make_settings(gemini_api_key="g-test"))
        assert provider.get_provider_name() == "gemini"
        assert "generativelanguage" in client_cls.call_args.kwargs["base_url"]

    def test_unavailable_without_keys(self) -> None:
        assert OpenAILLMProvider(make_settings()).is_available() is False

    @pytest.mark.asyncio
    async def test_complete_success(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_completion("An answer."))
        with patch(_CLIENT_PATH, return_value=mock_client):
            provider = OpenAILLMProvider(make_settings(gemini_api_key="g-test"))
            result = await provider.complete("system", "user", temperature=0.2, max_tokens=100)

        assert result == "An answer."
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gemini-1.5-flash"
        assert kwargs["messages"][0] == {"role": "system", "content": "system"}
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 100

    @pytest.mark.asyncio
    async def test_model_override(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_completion("ok"))
        with patch(_CLIENT_PATH, return_value=mock_client):
            provider = OpenAILLMProvider(make_settings(openai_api_key="sk-test"))
            await provider.complete("s", "u", model="gpt-4o")
        assert mock_client.chat.completions.create.call_args.kwargs["model"] == "gpt-4o"

    @pytest.mark.asyncio
    async def test_empty_content_raises(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_completion(None))
        with patch(_CLIENT_PATH, return_value=mock_client):
            provider = OpenAILLMProvider(make_settings(openai_api_key="sk-test"))
            with pytest.raises(ProviderError, match="empty response"):
                await provider.complete("s", "u")

    @pytest.mark.asyncio
    async def test_api_error_wrapped(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(
            side_effect=openai.APIError(message="Rate limit exceeded", request=MagicMock(), body=None)
        )
        with patch(_CLIENT_PATH, return_value=mock_client):
            provider = OpenAILLMProvider(make_settings(openai_api_key="sk-test"))
            with pytest.raises(ProviderError, match="Rate limit exceeded"):
                await provider.complete("s", "u")

    @pytest.mark.asyncio
    async def test_unconfigured_complete_raises(self) -> None:
        with pytest.raises(ProviderError):
            await OpenAILLMProvider(make_settings()).complete("s", "u")
