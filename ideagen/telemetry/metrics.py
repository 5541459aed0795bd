from __future__ import annotations

from prometheus_client import REGISTRY, Counter, Histogram


def _get_or_create_metric(factory, name: str, documentation: str, **kwargs):
    """
    Prometheus helper that tolerates re-registration across tests.
    """
    try:
        return factory(name, documentation, **kwargs)
    except ValueError:
        existing = getattr(REGISTRY, "_names_to_collectors", {}).get(name)
        if existing is not None:
            return existing
        raise


REQUESTS = _get_or_create_metric(
    Counter,
    "ideagen_requests_total",
    "Idea generation requests by outcome",
    labelnames=("outcome",),
)

RATE_LIMIT_BLOCKS = _get_or_create_metric(
    Counter,
    "ideagen_rate_limited_total",
    "Requests rejected by the per-caller rate limiter",
)

GATEWAY_LATENCY = _get_or_create_metric(
    Histogram,
    "ideagen_gateway_latency_seconds",
    "Latency of model gateway calls",
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0, 120.0),
)


def inc_request(outcome: str) -> None:
    try:
        REQUESTS.labels(outcome=outcome).inc()
    except Exception:  # pragma: no cover
        pass
