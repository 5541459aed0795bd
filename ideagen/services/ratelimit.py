from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Mapping

from ideagen.telemetry.metrics import RATE_LIMIT_BLOCKS

# Tests monkeypatch this to move the clock across window boundaries.
_NOW = time.monotonic


def _now() -> float:
    return _NOW()


UNKNOWN_CALLER = "unknown"


def caller_key(headers: Mapping[str, str]) -> str:
    """Bucket key from forwarded-IP style headers, falling back to a sentinel."""
    forwarded = (headers.get("x-forwarded-for") or "").split(",")[0].strip()
    if forwarded:
        return forwarded
    real_ip = (headers.get("x-real-ip") or "").strip()
    return real_ip or UNKNOWN_CALLER


@dataclass
class _Record:
    count: int
    reset_time: float


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    remaining: int
    retry_after: int


class FixedWindowLimiter:
    """
    In-process fixed-window counter keyed by caller.

    check(key) returns a RateDecision:
      - first sight of a key, or window elapsed: count=1, new window, allowed
      - count >= max_requests: denied, nothing incremented
      - otherwise: count += 1, allowed

    Best effort only: state is per process and lost on restart. Records are
    kept in window-start order, so expired ones sit at the front. The table
    never holds more than ``max_keys`` records; when it is full of live
    windows the oldest one is dropped.
    """

    def __init__(self, max_requests: int = 20, window_s: float = 3600.0, max_keys: int = 10000):
        self.max_requests = max(1, int(max_requests))
        self.window_s = float(window_s)
        self.max_keys = max(1, int(max_keys))
        self._records: OrderedDict[str, _Record] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def _make_room(self, now: float) -> None:
        while self._records:
            oldest = next(iter(self._records.values()))
            if now <= oldest.reset_time:
                break
            self._records.popitem(last=False)
        while len(self._records) >= self.max_keys:
            self._records.popitem(last=False)

    def check(self, key: str) -> RateDecision:
        now = _now()
        with self._lock:
            record = self._records.get(key)
            if record is None or now > record.reset_time:
                if record is None:
                    self._make_room(now)
                else:
                    del self._records[key]
                self._records[key] = _Record(count=1, reset_time=now + self.window_s)
                return RateDecision(True, self.max_requests - 1, 0)

            if record.count >= self.max_requests:
                RATE_LIMIT_BLOCKS.inc()
                return RateDecision(False, 0, int(self.window_s))

            record.count += 1
            return RateDecision(True, self.max_requests - record.count, 0)


def build_limiter(settings) -> FixedWindowLimiter:
    return FixedWindowLimiter(
        max_requests=settings.RATE_LIMIT_MAX,
        window_s=settings.RATE_LIMIT_WINDOW_S,
        max_keys=settings.RATE_LIMIT_MAX_KEYS,
    )


__all__ = [
    "UNKNOWN_CALLER",
    "FixedWindowLimiter",
    "RateDecision",
    "build_limiter",
    "caller_key",
]
