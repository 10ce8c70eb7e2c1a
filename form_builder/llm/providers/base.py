"""What the rating service needs from a model provider."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import jsonschema

from form_builder.llm.models import LLMError, LLMException, Message, StructuredResponse


@runtime_checkable
class LLMProvider(Protocol):
    provider_name: str

    async def complete_structured(
        self,
        messages: List[Message],
        schema: Dict[str, Any],
        model: str,
        max_tokens: int = 1024,
        temperature: float = 0.2,
        system_prompt: Optional[str] = None,
    ) -> StructuredResponse:
        """
        Ask ``model`` for output shaped like ``schema``.

        ``model`` may be an alias such as ``sonnet``. Raises ``LLMException``
        for transport failures and for answers that do not fit the schema.
        """
        ...


class BaseLLMProvider(ABC):
    """Shared pieces for concrete providers; subclasses set ``provider_name``."""

    provider_name: str = ""

    @abstractmethod
    async def complete_structured(
        self,
        messages: List[Message],
        schema: Dict[str, Any],
        model: str,
        max_tokens: int = 1024,
        temperature: float = 0.2,
        system_prompt: Optional[str] = None,
    ) -> StructuredResponse:
        ...

    @staticmethod
    def validate_output(data: Any, schema: Dict[str, Any]) -> Any:
        try:
            jsonschema.validate(instance=data, schema=schema)
        except jsonschema.ValidationError as e:
            raise LLMException(LLMError.invalid_output(f"Model output does not match schema: {e.message}"))
        return data
