"""Tests for the Anthropic provider, with HTTP served by httpx.MockTransport."""

import json

import httpx
import pytest

from form_builder.llm.models import LLMException, Message, MessageRole
from form_builder.llm.providers.anthropic import AnthropicProvider, WRAPPED_KEY
from form_builder.llm.schemas import FIELD_RATING_SCHEMA, FORM_RATING_SCHEMA


def tool_response(tool_input, status_code=200, name=AnthropicProvider.TOOL_NAME):
    return httpx.Response(status_code, json={
        "content": [
            {"type": "text", "text": "Submitting."},
            {"type": "tool_use", "id": "tu_1", "name": name, "input": tool_input},
        ],
        "usage": {"input_tokens": 120, "output_tokens": 30},
        "stop_reason": "tool_use",
    })


@pytest.fixture
def transport(monkeypatch):
    """Route the provider's AsyncClient through a handler; returns the request log."""
    state = {"handler": None, "requests": []}
    real_client = httpx.AsyncClient

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        return state["handler"](request)

    def client_factory(*args, **kwargs):
        return real_client(*args, transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client_factory)
    return state


async def call(provider, schema=FIELD_RATING_SCHEMA, system_prompt="Role:\nReviewer"):
    return await provider.complete_structured(
        messages=[Message(MessageRole.SYSTEM, "ignored"), Message.user("Rate this")],
        schema=schema,
        model="sonnet",
        max_tokens=300,
        temperature=0.1,
        system_prompt=system_prompt,
    )


class TestRequest:
    @pytest.mark.asyncio
    async def test_forces_tool_call(self, transport):
        transport["handler"] = lambda r: tool_response({"comment": "Good", "rate": "valid"})

        response = await call(AnthropicProvider(api_key="sk-test"))

        request = transport["requests"][0]
        body = json.loads(request.content)
        assert request.headers["x-api-key"] == "sk-test"
        assert request.headers["anthropic-version"] == AnthropicProvider.API_VERSION
        assert body["model"] == AnthropicProvider.MODELS["sonnet"]
        assert body["system"] == "Role:\nReviewer"
        assert body["messages"] == [{"role": "user", "content": "Rate this"}]
        assert body["tool_choice"] == {"type": "tool", "name": "submit_result"}
        assert body["tools"][0]["input_schema"] == FIELD_RATING_SCHEMA
        assert response.data == {"comment": "Good", "rate": "valid"}
        assert response.total_tokens == 150

    @pytest.mark.asyncio
    async def test_array_schema_wrapped(self, transport):
        items = [{"sectionTitle": "S", "questionText": "Q", "comment": "ok"}]
        transport["handler"] = lambda r: tool_response({WRAPPED_KEY: items})

        response = await call(AnthropicProvider(api_key="sk-test"), schema=FORM_RATING_SCHEMA)

        input_schema = json.loads(transport["requests"][0].content)["tools"][0]["input_schema"]
        assert input_schema["type"] == "object"
        assert input_schema["properties"][WRAPPED_KEY] == FORM_RATING_SCHEMA
        assert response.data == items

    @pytest.mark.asyncio
    async def test_custom_base_url(self, transport):
        transport["handler"] = lambda r: tool_response({"comment": "ok"})
        await call(AnthropicProvider(api_key="k", base_url="http://proxy.local/v1/messages"))
        assert str(transport["requests"][0].url) == "http://proxy.local/v1/messages"


class TestErrors:
    @pytest.mark.asyncio
    async def test_missing_api_key(self, transport):
        with pytest.raises(LLMException) as exc_info:
            await call(AnthropicProvider(api_key=""))
        assert exc_info.value.error.kind == "configuration"
        assert transport["requests"] == []

    @pytest.mark.asyncio
    async def test_rate_limited(self, transport):
        transport["handler"] = lambda r: httpx.Response(429, headers={"request-id": "req_1"}, json={})
        with pytest.raises(LLMException) as exc_info:
            await call(AnthropicProvider(api_key="k"))
        assert exc_info.value.error.kind == "rate_limit"
        assert exc_info.value.error.request_id == "req_1"

    @pytest.mark.asyncio
    async def test_api_error_message(self, transport):
        transport["handler"] = lambda r: httpx.Response(
            400, json={"error": {"type": "invalid_request_error", "message": "bad tools"}}
        )
        with pytest.raises(LLMException, match="bad tools") as exc_info:
            await call(AnthropicProvider(api_key="k"))
        assert exc_info.value.error.status_code == 400

    @pytest.mark.asyncio
    async def test_timeout(self, transport):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        transport["handler"] = handler
        with pytest.raises(LLMException) as exc_info:
            await call(AnthropicProvider(api_key="k"))
        assert exc_info.value.error.kind == "timeout"

    @pytest.mark.asyncio
    async def test_no_tool_block(self, transport):
        transport["handler"] = lambda r: httpx.Response(200, json={"content": [{"type": "text", "text": "hi"}]})
        with pytest.raises(LLMException) as exc_info:
            await call(AnthropicProvider(api_key="k"))
        assert exc_info.value.error.kind == "invalid_output"

    @pytest.mark.asyncio
    async def test_output_fails_schema(self, transport):
        transport["handler"] = lambda r: tool_response({"rate": "valid"})
        with pytest.raises(LLMException, match="does not match schema"):
            await call(AnthropicProvider(api_key="k"))

    @pytest.mark.asyncio
    async def test_wrapped_key_missing(self, transport):
        transport["handler"] = lambda r: tool_response({"ratings": []})
        with pytest.raises(LLMException) as exc_info:
            await call(AnthropicProvider(api_key="k"), schema=FORM_RATING_SCHEMA)
        assert exc_info.value.error.kind == "invalid_output"
