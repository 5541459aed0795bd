"""Recover the ``{"ideas": [...]}`` object from free-form model output.

Models do not always follow "JSON only" instructions: replies arrive wrapped
in markdown fences or with prose around the object. Recovery runs a short,
ordered chain of strategies and stops at the first one that yields an object
with an ``ideas`` list. Nothing partial is ever returned.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, Optional, Tuple

from ideagen.errors import RecoveryFailureError

log = logging.getLogger(__name__)

NO_JSON_MESSAGE = "Failed to generate ideas. Please try again."
UNPARSEABLE_MESSAGE = "Failed to process response. Please try again."

_FENCE_RE = re.compile(r"```(?:json)?\n?")
_BRACES_RE = re.compile(r"\{[\s\S]*\}")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {token}")


def _loads_strict(text: str) -> Any:
    # NaN and Infinity are not JSON and cannot be rendered back out.
    return json.loads(text, parse_constant=_reject_constant)


def _has_ideas(obj: Any) -> bool:
    return isinstance(obj, dict) and isinstance(obj.get("ideas"), list)


def parse_direct(text: str) -> Optional[Dict[str, Any]]:
    try:
        obj = _loads_strict(strip_code_fences(text))
    except ValueError:
        return None
    return obj if _has_ideas(obj) else None


def find_embedded_object(text: str) -> Optional[str]:
    # Greedy: first "{" through last "}".
    m = _BRACES_RE.search(text)
    return m.group(0) if m else None


def parse_embedded(text: str) -> Optional[Dict[str, Any]]:
    candidate = find_embedded_object(text)
    if candidate is None:
        return None
    try:
        obj = _loads_strict(candidate)
    except ValueError:
        return None
    return obj if _has_ideas(obj) else None


STRATEGIES: Tuple[Tuple[str, Callable[[str], Optional[Dict[str, Any]]]], ...] = (
    ("direct", parse_direct),
    ("embedded", parse_embedded),
)


def recover_ideas(text: str) -> Dict[str, Any]:
    for name, strategy in STRATEGIES:
        parsed = strategy(text)
        if parsed is not None:
            log.info("Recovered %d ideas via %s parse", len(parsed["ideas"]), name)
            return parsed
        log.warning("JSON recovery strategy %r failed", name)

    if find_embedded_object(text) is None:
        raise RecoveryFailureError(NO_JSON_MESSAGE)
    raise RecoveryFailureError(UNPARSEABLE_MESSAGE)


__all__ = [
    "NO_JSON_MESSAGE",
    "UNPARSEABLE_MESSAGE",
    "STRATEGIES",
    "find_embedded_object",
    "parse_direct",
    "parse_embedded",
    "recover_ideas",
    "strip_code_fences",
]
