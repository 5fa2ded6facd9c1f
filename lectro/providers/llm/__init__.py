"""LLM provider adapters."""

from lectro.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["OpenAILLMProvider"]
