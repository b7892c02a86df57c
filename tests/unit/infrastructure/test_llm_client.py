"""
Unit тесты для OpenRouterClient.

HTTP слой подменяется через httpx.MockTransport.
"""

import json

import httpx
import pytest

from chat_memory.core.errors import ModelCallError
from chat_memory.infrastructure.llm import OpenRouterClient

MODEL = "google/gemma-3-27b-it:free"
MESSAGES = [{"role": "user", "content": "Hello"}]


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_client(handler, **kwargs):
    options = {
        "base_url": "https://llm.test/api/v1/",
        "api_key": "test-key",
        "referer": "http://localhost:8080",
        "title": "Chat Memory",
        "max_retries": 0,
    }
    options.update(kwargs)
    return OpenRouterClient(transport=httpx.MockTransport(handler), **options)


@pytest.mark.asyncio
async def test_request_shape():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["headers"] = request.headers
        captured["payload"] = json.loads(request.content)
        return httpx.Response(200, json=completion("Hi!"))

    client = make_client(handler)

    result = await client.complete(model=MODEL, messages=MESSAGES, max_tokens=1000, temperature=0.7)

    assert result == "Hi!"
    assert captured["url"] == "https://llm.test/api/v1/chat/completions"
    assert captured["headers"]["authorization"] == "Bearer test-key"
    assert captured["headers"]["http-referer"] == "http://localhost:8080"
    assert captured["headers"]["x-title"] == "Chat Memory"
    assert captured["payload"] == {
        "model": MODEL,
        "messages": MESSAGES,
        "max_tokens": 1000,
        "temperature": 0.7,
        "stream": False,
    }


@pytest.mark.asyncio
async def test_http_error_maps_to_model_call_error():
    def handler(request):
        return httpx.Response(503, text="Service unavailable")

    client = make_client(handler)

    with pytest.raises(ModelCallError) as exc_info:
        await client.complete(model=MODEL, messages=MESSAGES, max_tokens=10, temperature=0.3)

    assert exc_info.value.status_code == 503
    assert exc_info.value.model == MODEL
    assert "Service unavailable" in exc_info.value.message


@pytest.mark.asyncio
async def test_transient_error_is_retried(monkeypatch):
    responses = iter([
        httpx.Response(429, text="slow down"),
        httpx.Response(200, json=completion("finally")),
    ])

    async def no_sleep(delay):
        return None

    monkeypatch.setattr("chat_memory.infrastructure.resilience.retry_handler.asyncio.sleep", no_sleep)
    client = make_client(lambda request: next(responses), max_retries=2)

    assert await client.complete(model=MODEL, messages=MESSAGES, max_tokens=10, temperature=0.3) == "finally"


@pytest.mark.asyncio
async def test_connection_error_maps_to_model_call_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(ModelCallError) as exc_info:
        await client.complete(model=MODEL, messages=MESSAGES, max_tokens=10, temperature=0.3)

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_missing_content_is_an_error():
    client = make_client(lambda request: httpx.Response(200, json={"choices": []}))

    with pytest.raises(ModelCallError) as exc_info:
        await client.complete(model=MODEL, messages=MESSAGES, max_tokens=10, temperature=0.3)

    assert "no message content" in exc_info.value.message


@pytest.mark.asyncio
async def test_invalid_json_is_an_error():
    client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(ModelCallError):
        await client.complete(model=MODEL, messages=MESSAGES, max_tokens=10, temperature=0.3)


@pytest.mark.asyncio
async def test_open_circuit_short_circuits_one_model_only():
    calls = []

    def handler(request):
        model = json.loads(request.content)["model"]
        calls.append(model)
        if model == MODEL:
            return httpx.Response(500, text="down")
        return httpx.Response(200, json=completion("fine"))

    client = make_client(handler, failure_threshold=1)

    with pytest.raises(ModelCallError):
        await client.complete(model=MODEL, messages=MESSAGES, max_tokens=10, temperature=0.3)
    with pytest.raises(ModelCallError) as exc_info:
        await client.complete(model=MODEL, messages=MESSAGES, max_tokens=10, temperature=0.3)

    assert "OPEN" in exc_info.value.message
    assert calls == [MODEL]
    assert await client.complete(model="x-ai/grok-4-fast:free", messages=MESSAGES, max_tokens=10, temperature=0.3) == "fine"


@pytest.mark.asyncio
async def test_http_client_is_shared_until_closed():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(200, json=completion("ok"))

    client = make_client(handler)
    http_client = client._http_client

    for _ in range(2):
        await client.complete(model=MODEL, messages=MESSAGES, max_tokens=10, temperature=0.3)

    assert len(calls) == 2
    assert client._http_client is http_client
    assert not http_client.is_closed

    await client.close()

    assert http_client.is_closed


@pytest.mark.parametrize("data,expected", [
    (completion("text"), "text"),
    (completion(None), None),
    ({"choices": []}, None),
    ({"choices": [{"message": "oops"}]}, None),
    ({"error": {"message": "bad"}}, None),
    (["not", "a", "dict"], None),
])
def test_extract_content(data, expected):
    assert OpenRouterClient.extract_content(data) == expected
