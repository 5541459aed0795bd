from __future__ import annotations

import json
from typing import Any, Dict, List

import httpx
import pytest

from ideagen.config import Settings
from ideagen.errors import (
    UnexpectedError,
    UpstreamQuotaError,
    UpstreamRateLimitError,
    UpstreamUnavailableError,
)
from ideagen.services.llm_client import GatewayClient, get_client

MESSAGES = [
    {"role": "system", "content": "sys"},
    {"role": "user", "content": "hi"},
]


def _client(handler, seen: List[httpx.Request] | None = None) -> GatewayClient:
    def _wrapped(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(_wrapped))
    return GatewayClient(
        api_key="secret",
        base_url="https://gateway.test/",
        model="google/gemini-2.5-flash",
        max_completion_tokens=4000,
        http_client=http,
    )


def _completion(content: Any) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


async def test_complete_sends_expected_request():
    seen: List[httpx.Request] = []
    client = _client(lambda r: httpx.Response(200, json=_completion('{"ideas": []}')), seen)

    text = await client.complete(MESSAGES)

    assert text == '{"ideas": []}'
    assert len(seen) == 1
    req = seen[0]
    assert req.method == "POST"
    assert str(req.url) == "https://gateway.test/v1/chat/completions"
    assert req.headers["Authorization"] == "Bearer secret"
    body = json.loads(req.content)
    assert body == {
        "model": "google/gemini-2.5-flash",
        "messages": MESSAGES,
        "max_completion_tokens": 4000,
    }


@pytest.mark.parametrize(
    "status,exc_type,http_status",
    [
        (429, UpstreamRateLimitError, 429),
        (402, UpstreamQuotaError, 402),
        (500, UpstreamUnavailableError, 500),
        (401, UpstreamUnavailableError, 500),
        (503, UpstreamUnavailableError, 500),
    ],
)
async def test_status_mapping(status, exc_type, http_status):
    calls: List[httpx.Request] = []
    client = _client(lambda r: httpx.Response(status, text="upstream says no"), calls)

    with pytest.raises(exc_type) as exc:
        await client.complete(MESSAGES)

    assert exc.value.status_code == http_status
    assert "upstream says no" not in exc.value.message
    # fail fast: no retries
    assert len(calls) == 1


async def test_upstream_429_has_no_retry_after():
    client = _client(lambda r: httpx.Response(429))
    with pytest.raises(UpstreamRateLimitError) as exc:
        await client.complete(MESSAGES)
    assert "Retry-After" not in exc.value.headers


async def test_transport_error_is_unexpected():
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(boom)
    with pytest.raises(UnexpectedError) as exc:
        await client.complete(MESSAGES)
    assert exc.value.status_code == 500
    assert exc.value.message == "An unexpected error occurred. Please try again."


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"choices": []}),
        httpx.Response(200, json={"unexpected": True}),
        httpx.Response(200, json=_completion(None)),
    ],
)
async def test_malformed_success_body_is_unexpected(response):
    client = _client(lambda r: response)
    with pytest.raises(UnexpectedError):
        await client.complete(MESSAGES)


def test_get_client_uses_settings():
    s = Settings(
        GATEWAY_API_KEY="k",
        GATEWAY_BASE_URL="https://example.test",
        GATEWAY_MODEL="m",
        GATEWAY_MAX_COMPLETION_TOKENS=123,
    )
    client = get_client(s)
    assert isinstance(client, GatewayClient)
    assert client.api_key == "k"
    assert client.base_url == "https://example.test"
    assert client.model == "m"
    assert client.max_completion_tokens == 123


def test_legacy_key_name_is_accepted(monkeypatch):
    monkeypatch.delenv("GATEWAY_API_KEY", raising=False)
    monkeypatch.setenv("LOVABLE_API_KEY", "legacy")
    assert Settings().GATEWAY_API_KEY == "legacy"
