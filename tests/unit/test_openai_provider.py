"""
Unit tests for the OpenAI-compatible provider.

The network is replaced with httpx.MockTransport so request construction and
failure classification can be checked end to end.
"""
import asyncio
import json

import httpx
import pytest

from polyglot.core.llm.exceptions import RemoteRejectedError, TransientError
from polyglot.core.llm.providers.openai import OpenAICompatibleProvider

ENDPOINT = "https://llm.test/v1/chat/completions"
MESSAGES = [
    {"role": "system", "content": "system prompt"},
    {"role": "user", "content": "Hallo"},
]


def completion(content, **extra):
    body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    body.update(extra)
    return body


def make_provider(handler):
    return OpenAICompatibleProvider(
        api_endpoint=ENDPOINT,
        model="gpt-3.5-turbo",
        transport=httpx.MockTransport(handler)
    )


async def generate(provider, timeout=5):
    try:
        return await provider.generate(MESSAGES, api_key="sk-abc", max_tokens=100,
                                       temperature=0.3, timeout=timeout)
    finally:
        await provider.close()


class TestRequest:

    @pytest.mark.asyncio
    async def test_payload_and_headers(self):
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion("Hello"))

        await generate(make_provider(handler))

        assert captured["url"] == ENDPOINT
        assert captured["auth"] == "Bearer sk-abc"
        assert captured["body"] == {
            "model": "gpt-3.5-turbo",
            "messages": MESSAGES,
            "max_tokens": 100,
            "temperature": 0.3,
        }


class TestSuccess:

    @pytest.mark.asyncio
    async def test_content_is_stripped(self):
        provider = make_provider(lambda request: httpx.Response(
            200, json=completion("  Hello world \n", usage={"prompt_tokens": 12, "completion_tokens": 3})
        ))
        response = await generate(provider)

        assert response.content == "Hello world"
        assert response.prompt_tokens == 12
        assert response.completion_tokens == 3

    @pytest.mark.asyncio
    async def test_null_content_is_empty(self):
        provider = make_provider(lambda request: httpx.Response(200, json=completion(None)))
        response = await generate(provider)
        assert response.content == ""


class TestFailureClassification:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [500, 502, 503])
    async def test_server_errors_are_transient(self, status):
        provider = make_provider(lambda request: httpx.Response(status, text="upstream down"))

        with pytest.raises(TransientError) as exc_info:
            await generate(provider)

        assert exc_info.value.status_code == status
        assert exc_info.value.message == f"HTTP error! status: {status}"

    @pytest.mark.asyncio
    async def test_client_error_uses_remote_message(self):
        provider = make_provider(lambda request: httpx.Response(
            401, json={"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}}
        ))

        with pytest.raises(RemoteRejectedError) as exc_info:
            await generate(provider)

        error = exc_info.value
        assert error.status_code == 401
        assert error.message == "Incorrect API key provided"
        assert error.remote_message == "Incorrect API key provided"

    @pytest.mark.asyncio
    async def test_client_error_without_body_uses_status(self):
        provider = make_provider(lambda request: httpx.Response(429, text="slow down"))

        with pytest.raises(RemoteRejectedError) as exc_info:
            await generate(provider)

        assert exc_info.value.message == "HTTP error! status: 429"
        assert exc_info.value.remote_message is None

    @pytest.mark.asyncio
    async def test_transport_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransientError) as exc_info:
            await generate(make_provider(handler))

        assert exc_info.value.message == "Request timeout - please try again"

    @pytest.mark.asyncio
    async def test_wall_clock_timeout(self):
        async def handler(request):
            await asyncio.sleep(1)
            return httpx.Response(200, json=completion("late"))

        with pytest.raises(TransientError) as exc_info:
            await generate(make_provider(handler), timeout=0.05)

        assert exc_info.value.message == "Request timeout - please try again"

    @pytest.mark.asyncio
    async def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransientError) as exc_info:
            await generate(make_provider(handler))

        assert exc_info.value.message.startswith("Connection failed")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"choices": []},
        {"unexpected": True},
        {"choices": [{"text": "legacy"}]},
        {"choices": [{"message": {"content": ["Hello"]}}]},
        {"choices": [{"message": {"content": {"text": "Hello"}}}]},
        {"choices": [{"message": "Hello"}]},
        {"choices": [{"message": {"content": "Hello"}}], "usage": "n/a"},
        {"choices": [{"message": {"content": "Hello"}}], "usage": {"prompt_tokens": "many"}},
    ])
    async def test_malformed_body_is_transient(self, body):
        provider = make_provider(lambda request: httpx.Response(200, json=body))

        with pytest.raises(TransientError):
            await generate(provider)

    @pytest.mark.asyncio
    async def test_non_json_body_is_transient(self):
        provider = make_provider(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(TransientError):
            await generate(provider)
