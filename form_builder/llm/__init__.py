"""LLM integration: providers, prompts and answer rating."""

from form_builder.llm.models import (
    Message,
    MessageRole,
    StructuredResponse,
    LLMError,
    LLMErrorKind,
    LLMException,
)
from form_builder.llm.providers import (
    LLMProvider,
    BaseLLMProvider,
    AnthropicProvider,
    MockLLMProvider,
)
from form_builder.llm.rating_service import RatingService

__all__ = [
    "Message",
    "MessageRole",
    "StructuredResponse",
    "LLMError",
    "LLMErrorKind",
    "LLMException",
    "LLMProvider",
    "BaseLLMProvider",
    "AnthropicProvider",
    "MockLLMProvider",
    "RatingService",
]
