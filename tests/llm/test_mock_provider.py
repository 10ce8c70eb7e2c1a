"""Tests for the mock provider."""

import pytest

from form_builder.llm.models import LLMError, LLMException, Message
from form_builder.llm.providers.base import LLMProvider
from form_builder.llm.providers.mock import MockLLMProvider
from form_builder.llm.schemas import FIELD_RATING_SCHEMA


def test_satisfies_protocol():
    assert isinstance(MockLLMProvider(), LLMProvider)


@pytest.mark.asyncio
async def test_records_calls():
    provider = MockLLMProvider()
    await provider.complete_structured([Message.user("hi")], FIELD_RATING_SCHEMA, "sonnet", max_tokens=64)

    assert provider.call_count == 1
    assert provider.last_call().user_prompt == "hi"
    assert provider.last_call().max_tokens == 64

    provider.calls.clear()
    assert provider.last_call() is None


@pytest.mark.asyncio
async def test_respond_sees_the_call():
    provider = MockLLMProvider(respond=lambda call: {"comment": call.system_prompt})
    response = await provider.complete_structured(
        [Message.user("hi")], FIELD_RATING_SCHEMA, "sonnet", system_prompt="Role:\nX",
    )
    assert response.data == {"comment": "Role:\nX"}
    assert response.model == "sonnet"


@pytest.mark.asyncio
async def test_data_checked_against_schema():
    provider = MockLLMProvider(data={"rate": "valid"})
    with pytest.raises(LLMException) as exc_info:
        await provider.complete_structured([Message.user("a")], FIELD_RATING_SCHEMA, "sonnet")
    assert exc_info.value.error.kind == "invalid_output"


@pytest.mark.asyncio
async def test_queued_errors_raised_in_order():
    provider = MockLLMProvider()
    provider.fail_next(LLMError.timeout("late"))
    provider.fail_next(LLMError.rate_limit("busy"))

    with pytest.raises(LLMException, match="late"):
        await provider.complete_structured([Message.user("a")], FIELD_RATING_SCHEMA, "sonnet")
    with pytest.raises(LLMException, match="busy"):
        await provider.complete_structured([Message.user("b")], FIELD_RATING_SCHEMA, "sonnet")

    response = await provider.complete_structured([Message.user("c")], FIELD_RATING_SCHEMA, "sonnet")
    assert response.data["rate"] == "valid"
    assert provider.call_count == 3
