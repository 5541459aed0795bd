from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ideagen.config import Settings
from ideagen.errors import (
    IdeaServiceError,
    PayloadTooLargeError,
    RateLimitError,
    UnexpectedError,
)
from ideagen.schemas import ErrorResponse, IdeaRequest, IdeaRequestBody, IdeasResponse
from ideagen.security.auth import require_bearer
from ideagen.services.llm_client import get_client
from ideagen.services.prompts import build_messages
from ideagen.services.ratelimit import FixedWindowLimiter, caller_key
from ideagen.services.recovery import recover_ideas
from ideagen.telemetry.metrics import inc_request

log = logging.getLogger(__name__)

router = APIRouter(tags=["ideas"])

_ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    status: {"model": ErrorResponse} for status in (400, 401, 402, 413, 429, 500)
}


# ---------------------------
# Helpers
# ---------------------------

def _declared_length(request: Request) -> int | None:
    raw = request.headers.get("content-length")
    if not raw:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def check_declared_size(request: Request, limit: int) -> None:
    size = _declared_length(request)
    if size is not None and size > limit:
        raise PayloadTooLargeError()


async def read_body_capped(request: Request, limit: int) -> bytes:
    """Read the body, aborting as soon as more than ``limit`` bytes arrive."""
    chunks = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > limit:
            raise PayloadTooLargeError()
        chunks.append(chunk)
    return b"".join(chunks)


def parse_body(raw: bytes) -> Mapping[str, Any]:
    """Empty bodies and non-object JSON become ``{}``; malformed JSON is unexpected."""
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError as exc:
        log.error("Malformed JSON body: %s", exc)
        raise UnexpectedError() from exc
    return body if isinstance(body, dict) else {}


def check_rate_limit(request: Request, limiter: FixedWindowLimiter | None) -> int | None:
    if limiter is None:
        return None
    key = caller_key(request.headers)
    decision = limiter.check(key)
    if not decision.allowed:
        log.warning("Rate limit exceeded for key: %s", key)
        raise RateLimitError(decision.retry_after)
    return decision.remaining


# ---------------------------
# Route
# ---------------------------

async def _generate(request: Request) -> Dict[str, Any]:
    settings: Settings = request.app.state.settings
    limiter: FixedWindowLimiter | None = request.app.state.limiter

    require_bearer(request, settings.ACCESS_TOKEN)
    check_declared_size(request, settings.MAX_REQUEST_BYTES)
    raw = await read_body_capped(request, settings.MAX_REQUEST_BYTES)

    # Counted before validation: invalid requests still consume a slot.
    remaining = check_rate_limit(request, limiter)

    body = parse_body(raw)
    idea_req = IdeaRequest.from_payload(
        body,
        max_length=settings.MAX_STRING_LENGTH,
        max_days=settings.MAX_DAYS,
        max_ideas=settings.MAX_IDEA_COUNT,
    )
    log.info(
        "Generating ideas",
        extra={
            "domain": idea_req.domain,
            "audience": idea_req.audience,
            "difficulty": idea_req.difficulty,
            "time_available_days": idea_req.time_available_days,
            "mode": idea_req.mode,
            "rate_limit_remaining": remaining,
        },
    )

    client = get_client(settings)
    content = await client.complete(build_messages(idea_req))
    log.info("Raw AI response length: %d", len(content))

    parsed = recover_ideas(content)
    log.info("Successfully generated %d ideas", len(parsed["ideas"]))
    return parsed


@router.post(
    "/",
    response_model=None,
    responses={200: {"model": IdeasResponse}, **_ERROR_RESPONSES},
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {"schema": IdeaRequestBody.model_json_schema()}
            }
        }
    },
)
@router.post("/generate-idea", response_model=None, include_in_schema=False)
async def generate_ideas(request: Request) -> JSONResponse:
    """
    Generate structured project ideas:
      1) size + rate checks
      2) sanitize and validate the idea parameters
      3) one gateway call, no retries
      4) recover the ``{"ideas": [...]}`` object from the reply
    """
    try:
        resp = JSONResponse(await _generate(request))
    except IdeaServiceError as exc:
        inc_request(exc.outcome)
        raise
    except Exception as exc:
        log.error("Error in generate-ideas handler", exc_info=exc)
        inc_request("error")
        raise UnexpectedError() from exc

    inc_request("ok")
    return resp
