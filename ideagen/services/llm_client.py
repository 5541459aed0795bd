# file: ideagen/services/llm_client.py
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from ideagen.config import Settings, get_settings
from ideagen.errors import (
    UnexpectedError,
    UpstreamQuotaError,
    UpstreamRateLimitError,
    UpstreamUnavailableError,
)
from ideagen.net.http_client import get_http_client
from ideagen.telemetry.metrics import GATEWAY_LATENCY

log = logging.getLogger(__name__)


class BaseLLMClient:
    async def complete(self, messages: List[Dict[str, str]]) -> str:
        raise NotImplementedError


class GatewayClient(BaseLLMClient):
    """
    Chat Completions client for an OpenAI-compatible model gateway.
    - One request per call, no retries.
    - Never logs request bodies or the bearer credential.
    - Maps gateway failures onto caller-facing errors.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        model: str,
        max_completion_tokens: int = 4000,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key or ""
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.max_completion_tokens = int(max_completion_tokens)
        self._http = http_client

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": messages,
            "max_completion_tokens": self.max_completion_tokens,
        }

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        url = f"{self.base_url}/v1/chat/completions"
        http = self._http or get_http_client()
        start = time.perf_counter()
        try:
            resp = await http.post(url, headers=self._headers(), json=self._payload(messages))
        except httpx.HTTPError as exc:
            log.error("AI gateway transport error: %s", exc)
            raise UnexpectedError() from exc
        finally:
            GATEWAY_LATENCY.observe(time.perf_counter() - start)

        if resp.status_code >= 400:
            log.error("AI gateway error: %s %s", resp.status_code, resp.text)
            if resp.status_code == 429:
                raise UpstreamRateLimitError()
            if resp.status_code == 402:
                raise UpstreamQuotaError()
            raise UpstreamUnavailableError()

        try:
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            log.error("AI gateway returned a malformed body: %s", exc)
            raise UnexpectedError() from exc
        if not isinstance(content, str):
            log.error("AI gateway returned non-text content: %r", type(content).__name__)
            raise UnexpectedError()
        return content


def get_client(settings: Optional[Settings] = None) -> BaseLLMClient:
    s = settings or get_settings()
    return GatewayClient(
        api_key=s.GATEWAY_API_KEY,
        base_url=s.GATEWAY_BASE_URL,
        model=s.GATEWAY_MODEL,
        max_completion_tokens=s.GATEWAY_MAX_COMPLETION_TOKENS,
    )
