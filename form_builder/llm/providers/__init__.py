"""LLM providers."""

from form_builder.llm.providers.base import LLMProvider, BaseLLMProvider
from form_builder.llm.providers.anthropic import AnthropicProvider
from form_builder.llm.providers.mock import MockLLMProvider, MockCall

__all__ = [
    "LLMProvider",
    "BaseLLMProvider",
    "AnthropicProvider",
    "MockLLMProvider",
    "MockCall",
]
