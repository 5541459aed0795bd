from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

_REQUEST_ID: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_HEADER = "X-Request-ID"


def get_request_id() -> Optional[str]:
    """
    Return the current request id (if any) set by RequestIDMiddleware.
    """
    return _REQUEST_ID.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Ensures every request has a request id:
    - Accept an incoming X-Request-ID if it is non-blank.
    - Otherwise generate a new UUID4.
    - Expose it via contextvar for logging and error bodies.
    - Echo it back on the response headers.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = (request.headers.get(_HEADER) or "").strip() or str(uuid.uuid4())

        token = _REQUEST_ID.set(rid)
        try:
            request.state.request_id = rid
            response: Response = await call_next(request)
        finally:
            _REQUEST_ID.reset(token)

        if response.headers.get(_HEADER) is None:
            response.headers[_HEADER] = rid
        return response
