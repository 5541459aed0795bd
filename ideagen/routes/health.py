from __future__ import annotations

import time
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["ops"])


def _ok(name: str, detail: Any | None = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"status": "ok"}
    if detail is not None:
        payload["detail"] = detail
    return {name: payload}


def _fail(name: str, detail: Any | None = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"status": "fail"}
    if detail is not None:
        payload["detail"] = detail
    return {name: payload}


def _check_gateway(app: Any) -> Dict[str, Any]:
    settings = getattr(app.state, "settings", None)
    if settings is None:
        return _fail("gateway", "settings unavailable")
    detail = {"base_url": settings.GATEWAY_BASE_URL, "model": settings.GATEWAY_MODEL}
    if not settings.GATEWAY_API_KEY:
        detail["error"] = "api key not configured"
        return _fail("gateway", detail)
    return _ok("gateway", detail)


def _check_ratelimit(app: Any) -> Dict[str, Any]:
    limiter = getattr(app.state, "limiter", None)
    if limiter is None:
        return _ok("ratelimit", {"enabled": False})
    return _ok(
        "ratelimit",
        {
            "enabled": True,
            "max": limiter.max_requests,
            "window_s": int(limiter.window_s),
            "tracked_keys": len(limiter),
        },
    )


@router.get("/livez")
async def livez() -> JSONResponse:
    return JSONResponse({"status": "ok", "ok": True, "time": time.time()})


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    checks: Dict[str, Any] = {}
    checks.update(_check_gateway(request.app))
    checks.update(_check_ratelimit(request.app))

    overall = "ok"
    for value in checks.values():
        if isinstance(value, dict) and value.get("status") == "fail":
            overall = "fail"
            break

    status_code = 200 if overall == "ok" else 503
    payload = {"status": overall, "ok": overall == "ok", "checks": checks}
    return JSONResponse(payload, status_code=status_code)


@router.get("/healthz")
async def healthz(request: Request) -> JSONResponse:
    settings = request.app.state.settings
    return JSONResponse(
        {"status": "ok", "ok": True, "env": settings.ENV, "version": settings.VERSION}
    )
