"""In-process provider returning canned structured data, for tests and local runs."""

import copy
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from form_builder.llm.models import (
    LLMError,
    LLMException,
    Message,
    MessageRole,
    StructuredResponse,
)
from form_builder.llm.providers.base import BaseLLMProvider

DEFAULT_DATA = {"comment": "Looks good.", "rate": "valid"}


@dataclass
class MockCall:
    """What the provider was asked for."""
    user_prompt: str
    system_prompt: Optional[str]
    schema: Dict[str, Any]
    model: str
    max_tokens: int
    temperature: float


class MockLLMProvider(BaseLLMProvider):
    """
    Answers every call with ``data``, or with ``respond(call)`` when given.

    The answer is checked against the requested schema exactly like real
    model output, so callers see ``invalid_output`` errors for bad data.
    Errors queued with ``fail_next`` are raised in order, one per call.
    """

    provider_name = "mock"

    def __init__(
        self,
        data: Any = None,
        respond: Optional[Callable[[MockCall], Any]] = None,
    ):
        self.data = copy.deepcopy(DEFAULT_DATA) if data is None else data
        self.respond = respond
        self.calls: List[MockCall] = []
        self._errors: List[LLMError] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def last_call(self) -> Optional[MockCall]:
        return self.calls[-1] if self.calls else None

    def fail_next(self, error: LLMError) -> None:
        self._errors.append(error)

    async def complete_structured(
        self,
        messages: List[Message],
        schema: Dict[str, Any],
        model: str,
        max_tokens: int = 1024,
        temperature: float = 0.2,
        system_prompt: Optional[str] = None,
    ) -> StructuredResponse:
        call = MockCall(
            user_prompt="\n".join(m.content for m in messages if m.role == MessageRole.USER),
            system_prompt=system_prompt,
            schema=schema,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        self.calls.append(call)

        if self._errors:
            raise LLMException(self._errors.pop(0))

        data = self.respond(call) if self.respond else copy.deepcopy(self.data)
        return StructuredResponse(data=self.validate_output(data, schema), model=model)
