from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

_LOG = logging.getLogger("ideagen.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        resp = await call_next(request)
        _LOG.info(
            "http_access",
            extra={
                "path": request.url.path,
                "method": request.method,
                "status": resp.status_code,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return resp
