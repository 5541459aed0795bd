from __future__ import annotations

import hmac
from typing import Optional

from starlette.requests import Request

from ideagen.errors import UnauthorizedError


def require_bearer(request: Request, expected: Optional[str]) -> None:
    """Enforce the optional static bearer token.

    Behavior:
      - If no token is configured -> allow
      - Else require Authorization: Bearer <token>
    """
    expected = (expected or "").strip()
    if not expected:
        return

    auth = request.headers.get("authorization", "")
    if not auth.lower().startswith("bearer "):
        raise UnauthorizedError()

    token = auth.split(" ", 1)[1].strip()
    if not hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8")):
        raise UnauthorizedError()
