"""
Tests for the chat completion language model client.
"""

import json

import httpx
import pytest

from comment_generator.errors import GenerationUpstreamError
from comment_generator.protocols import LanguageModel
from comment_generator.repositories import DeepSeekLanguageModel


def model_for(handler) -> DeepSeekLanguageModel:
    return DeepSeekLanguageModel(
        api_key="sk-test",
        model_name="deepseek-chat",
        base_url="https://llm.example.com/v1/",
        transport=httpx.MockTransport(handler),
    )


def test_satisfies_protocol():
    """Test the client satisfies the LanguageModel protocol."""
    assert isinstance(model_for(lambda request: httpx.Response(200)), LanguageModel)


@pytest.mark.asyncio
async def test_complete_sends_chat_request():
    """Test the request carries both prompts, temperature and token budget."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200, json={"choices": [{"message": {"role": "assistant", "content": "好吃！"}}]}
        )

    model = model_for(handler)
    text = await model.complete("system", "user", temperature=0.85, max_tokens=300)
    await model.close()

    assert text == "好吃！"
    assert seen["url"] == "https://llm.example.com/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["model"] == "deepseek-chat"
    assert seen["body"]["messages"] == [
        {"role": "system", "content": "system"},
        {"role": "user", "content": "user"},
    ]
    assert seen["body"]["temperature"] == 0.85
    assert seen["body"]["max_tokens"] == 300


@pytest.mark.asyncio
async def test_error_status_raises_with_status_and_body():
    """Test a non-2xx answer raises GenerationUpstreamError carrying status and body."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, text="Insufficient Balance")

    with pytest.raises(GenerationUpstreamError) as exc_info:
        await model_for(handler).complete("s", "u", 0.85, 100)

    assert exc_info.value.status == 402
    assert exc_info.value.body == "Insufficient Balance"
    assert exc_info.value.to_dict()["kind"] == "GenerationUpstreamError"


@pytest.mark.asyncio
async def test_malformed_body_raises():
    """Test a 200 answer without choices raises GenerationUpstreamError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    with pytest.raises(GenerationUpstreamError):
        await model_for(handler).complete("s", "u", 0.85, 100)


@pytest.mark.asyncio
async def test_network_error_raises():
    """Test a transport failure raises GenerationUpstreamError without a status."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(GenerationUpstreamError) as exc_info:
        await model_for(handler).complete("s", "u", 0.85, 100)
    assert exc_info.value.status is None


@pytest.mark.asyncio
async def test_null_content_is_returned_empty():
    """Test null content comes back as an empty string."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": [{"message": {"content": None}}]})

    assert await model_for(handler).complete("s", "u", 0.85, 100) == ""
