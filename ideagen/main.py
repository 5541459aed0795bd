# ideagen/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ideagen.config import Settings, get_settings
from ideagen.middleware.access_log import AccessLogMiddleware
from ideagen.middleware.cors import install_cors
from ideagen.middleware.request_id import RequestIDMiddleware
from ideagen.net.http_client import close_http_client
from ideagen.routes import generate, health, metrics
from ideagen.services.ratelimit import build_limiter
from ideagen.telemetry.errors import register_error_handlers
from ideagen.telemetry.logging import configure_logging

log = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "ideas", "description": "Generate structured project ideas."},
    {"name": "ops", "description": "Liveness and readiness probes."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(
        "startup",
        extra={
            "env": app.state.settings.ENV,
            "model": app.state.settings.GATEWAY_MODEL,
            "rate_limit_enabled": app.state.limiter is not None,
        },
    )
    try:
        yield
    finally:
        await close_http_client()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, json_lines=settings.LOG_JSON)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Validates idea parameters, asks a model gateway for project ideas, "
        "and returns them as JSON.",
        version=settings.VERSION,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )
    app.state.settings = settings
    # One limiter per app; the app lives for the whole process.
    app.state.limiter = build_limiter(settings) if settings.RATE_LIMIT_ENABLED else None

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(metrics.router)
    app.include_router(generate.router)

    # Last added runs first: request id wraps access log wraps CORS.
    install_cors(app, settings.cors_origins())
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    return app


app = create_app()
