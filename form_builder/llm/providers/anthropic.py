"""Anthropic Messages API provider.

Structured output comes from forcing the model to call one tool whose
``input_schema`` is the schema we want back.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from form_builder.llm.models import (
    LLMError,
    LLMException,
    Message,
    MessageRole,
    StructuredResponse,
)
from form_builder.llm.providers.base import BaseLLMProvider

logger = logging.getLogger(__name__)

# Tool input must be an object; other schemas are nested under this key.
WRAPPED_KEY = "items"


def _wrap_schema(schema: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
    if schema.get("type") == "object":
        return schema, False
    wrapper = {"type": "object", "properties": {WRAPPED_KEY: schema}, "required": [WRAPPED_KEY]}
    return wrapper, True


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"].get("message", response.text)
    return response.text


class AnthropicProvider(BaseLLMProvider):
    API_URL = "https://api.anthropic.com/v1/messages"
    API_VERSION = "2023-06-01"
    TOOL_NAME = "submit_result"

    MODELS = {
        "sonnet": "claude-sonnet-4-20250514",
        "haiku": "claude-3-5-haiku-20241022",
        "opus": "claude-opus-4-20250514",
    }

    provider_name = "anthropic"

    def __init__(self, api_key: str, base_url: Optional[str] = None, timeout: float = 60.0):
        self._api_key = api_key
        self._url = base_url or self.API_URL
        self._timeout = timeout

    def _payload(
        self,
        messages: List[Message],
        input_schema: Dict[str, Any],
        model: str,
        max_tokens: int,
        temperature: float,
        system_prompt: Optional[str],
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            # system text travels in its own field
            "messages": [m.to_dict() for m in messages if m.role != MessageRole.SYSTEM],
            "tools": [{
                "name": self.TOOL_NAME,
                "description": "Return the result in the required structure.",
                "input_schema": input_schema,
            }],
            "tool_choice": {"type": "tool", "name": self.TOOL_NAME},
        }
        if system_prompt:
            payload["system"] = system_prompt
        return payload

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": self.API_VERSION,
            "content-type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise LLMException(LLMError.timeout(f"Request timed out: {e}"))
        except httpx.RequestError as e:
            raise LLMException(LLMError.api_error(f"Request failed: {e}", 0))

        request_id = response.headers.get("request-id")
        if response.status_code == 429:
            raise LLMException(LLMError.rate_limit("Rate limit exceeded", request_id))
        if response.is_error:
            raise LLMException(
                LLMError.api_error(_error_message(response), response.status_code, request_id)
            )
        return response

    def _tool_input(self, body: Dict[str, Any], wrapped: bool) -> Any:
        blocks = [
            b for b in body.get("content", [])
            if b.get("type") == "tool_use" and b.get("name") == self.TOOL_NAME
        ]
        if not blocks:
            raise LLMException(LLMError.invalid_output("Model returned no structured output"))

        tool_input = blocks[0].get("input")
        if not wrapped:
            return tool_input
        if not isinstance(tool_input, dict) or WRAPPED_KEY not in tool_input:
            raise LLMException(LLMError.invalid_output(f"Structured output is missing '{WRAPPED_KEY}'"))
        return tool_input[WRAPPED_KEY]

    async def complete_structured(
        self,
        messages: List[Message],
        schema: Dict[str, Any],
        model: str,
        max_tokens: int = 1024,
        temperature: float = 0.2,
        system_prompt: Optional[str] = None,
    ) -> StructuredResponse:
        if not self._api_key:
            raise LLMException(LLMError.configuration("ANTHROPIC_API_KEY is not set"))

        model = self.MODELS.get(model, model)
        input_schema, wrapped = _wrap_schema(schema)
        payload = self._payload(messages, input_schema, model, max_tokens, temperature, system_prompt)

        started = time.perf_counter()
        response = await self._post(payload)
        latency_ms = (time.perf_counter() - started) * 1000

        body = response.json()
        data = self.validate_output(self._tool_input(body, wrapped), schema)
        usage = body.get("usage", {})
        result = StructuredResponse(
            data=data,
            model=model,
            input_tokens=usage.get("input_tokens", 0),
            output_tokens=usage.get("output_tokens", 0),
            latency_ms=latency_ms,
            stop_reason=body.get("stop_reason", "tool_use"),
        )
        logger.debug(f"Anthropic call model={model} tokens={result.total_tokens} latency={latency_ms:.0f}ms")
        return result
