from __future__ import annotations

import os
from typing import Optional

import httpx

_client: Optional[httpx.AsyncClient] = None


def _int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def get_http_client() -> httpx.AsyncClient:
    global _client
    if _client is None or _client.is_closed:
        limits = httpx.Limits(
            max_connections=_int("HTTPX_MAX_CONNECTIONS", 100),
            max_keepalive_connections=_int("HTTPX_MAX_KEEPALIVE", 20),
            keepalive_expiry=_int("HTTPX_KEEPALIVE_S", 20),
        )
        # Model completions routinely take tens of seconds.
        _client = httpx.AsyncClient(
            timeout=_int("HTTPX_TIMEOUT_S", 60),
            limits=limits,
        )
    return _client


async def close_http_client() -> None:
    global _client
    client, _client = _client, None
    if client is not None and not client.is_closed:
        await client.aclose()
