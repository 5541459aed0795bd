from __future__ import annotations

import math
import re
from typing import Any, Iterable

MAX_STRING_LENGTH = 500

VALID_DIFFICULTIES = ("beginner", "intermediate", "advanced", "easy", "medium", "hard")
VALID_MODES = ("hackathon", "startup", "academic", "beginner", "personal", "learning")

_ANGLE_RE = re.compile(r"[<>]")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def sanitize_string(value: Any, max_length: int = MAX_STRING_LENGTH) -> str:
    """Degrade any input to a safe, bounded string. Never raises.

    Non-strings become ``""``; angle brackets are removed, surrounding
    whitespace trimmed, and the result cut to ``max_length`` characters.
    """
    if not isinstance(value, str):
        return ""
    return _ANGLE_RE.sub("", value).strip()[:max_length]


def _coerce_int(value: Any) -> int | float | None:
    # bool is an int subclass but is not a count
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float):
            if math.isnan(value):
                return None
            if math.isinf(value):
                return value
        return int(value)
    m = _LEADING_INT_RE.match(str(value))
    if not m:
        return None
    return int(m.group(1))


def validate_number(value: Any, minimum: int, maximum: int, default: int) -> int:
    """Coerce ``value`` to an int clamped into ``[minimum, maximum]``.

    Strings are read like a leading-integer parse (``"12 days"`` -> 12).
    Anything that does not yield a number returns ``default`` unclamped.
    """
    num = _coerce_int(value)
    if num is None:
        return default
    return int(min(max(num, minimum), maximum))


def validate_choice(value: str, allowed: Iterable[str]) -> bool:
    return value.lower() in set(allowed)


__all__ = [
    "MAX_STRING_LENGTH",
    "VALID_DIFFICULTIES",
    "VALID_MODES",
    "sanitize_string",
    "validate_number",
    "validate_choice",
]
