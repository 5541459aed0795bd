"""
Permissive CORS for browser callers.

Every OPTIONS request is answered here with 204 and the CORS headers, whatever
the path and whether or not the caller sent Origin / Access-Control-Request-*
headers. All other responses get the same headers added.
"""

from __future__ import annotations

from typing import Dict, Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
ALLOW_METHODS = "POST, OPTIONS"


def _origin_for(origin: str | None, allowed: Iterable[str]) -> str | None:
    allowed = list(allowed)
    if "*" in allowed:
        return "*"
    if origin and origin in allowed:
        return origin
    return None


def cors_headers(origin: str | None, allowed: Iterable[str]) -> Dict[str, str]:
    headers = {
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
    }
    acao = _origin_for(origin, allowed)
    if acao is not None:
        headers["Access-Control-Allow-Origin"] = acao
        if acao != "*":
            headers["Vary"] = "Origin"
    return headers


class CORSMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, allow_origins: Iterable[str] = ("*",)) -> None:
        super().__init__(app)
        self._allow_origins = tuple(allow_origins) or ("*",)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        headers = cors_headers(request.headers.get("origin"), self._allow_origins)
        if request.method.upper() == "OPTIONS":
            return Response(status_code=204, headers=headers)

        resp = await call_next(request)
        for key, val in headers.items():
            resp.headers.setdefault(key, val)
        return resp


def install_cors(app, allow_origins: Iterable[str]) -> None:
    app.add_middleware(CORSMiddleware, allow_origins=list(allow_origins))
