"""Global JSON error handling: every failure becomes ``{"error": message}``."""

from __future__ import annotations

import logging
from typing import Dict, Optional
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ideagen.errors import GENERIC_ERROR, IdeaServiceError
from ideagen.middleware.request_id import get_request_id

log = logging.getLogger(__name__)

_STATUS_TO_MESSAGE = {
    404: "Not found",
    405: "Method not allowed",
}


def _rid_from_request(request: Request) -> str:
    return get_request_id() or request.headers.get("X-Request-ID") or str(uuid4())


def json_error(
    request: Request,
    *,
    message: str,
    status: int,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    resp = JSONResponse(status_code=status, content={"error": message}, headers=headers)
    resp.headers["X-Request-ID"] = _rid_from_request(request)
    return resp


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(IdeaServiceError)
    async def service_exc_handler(request: Request, exc: IdeaServiceError) -> JSONResponse:
        return json_error(request, message=exc.message, status=exc.status_code, headers=exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = _STATUS_TO_MESSAGE.get(exc.status_code)
        if message is None:
            message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        return json_error(
            request,
            message=message,
            status=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return json_error(request, message="Invalid request", status=400)

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception) -> JSONResponse:
        # Do not leak internals; the log line carries the request id.
        log.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return json_error(request, message=GENERIC_ERROR, status=500)
