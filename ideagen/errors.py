# ideagen/errors.py
"""Caller-facing error taxonomy.

Each error carries the HTTP status and the exact message returned to the
caller as ``{"error": message}``. Diagnostic detail belongs in the logs, never
in these messages.
"""

from __future__ import annotations

from typing import Dict, Optional

GENERIC_ERROR = "An unexpected error occurred. Please try again."


class IdeaServiceError(Exception):
    status_code: int = 500
    default_message: str = GENERIC_ERROR
    outcome: str = "error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.headers: Dict[str, str] = dict(headers or {})
        super().__init__(self.message)


class ClientInputError(IdeaServiceError):
    status_code = 400
    outcome = "client_error"
    default_message = "Invalid request"


class UnauthorizedError(IdeaServiceError):
    status_code = 401
    outcome = "client_error"
    default_message = "Unauthorized"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class PayloadTooLargeError(IdeaServiceError):
    status_code = 413
    outcome = "client_error"
    default_message = "Request too large"


class RateLimitError(IdeaServiceError):
    status_code = 429
    outcome = "rate_limited"
    default_message = "Rate limit exceeded. Please try again later."

    def __init__(self, retry_after_s: int, message: Optional[str] = None) -> None:
        self.retry_after_s = int(retry_after_s)
        super().__init__(message, headers={"Retry-After": str(self.retry_after_s)})


class UpstreamRateLimitError(IdeaServiceError):
    status_code = 429
    outcome = "upstream_error"
    default_message = "Rate limit exceeded. Please try again in a moment."


class UpstreamQuotaError(IdeaServiceError):
    status_code = 402
    outcome = "upstream_error"
    default_message = "AI credits exhausted. Please contact support."


class UpstreamUnavailableError(IdeaServiceError):
    status_code = 500
    outcome = "upstream_error"
    default_message = "Service temporarily unavailable. Please try again."


class RecoveryFailureError(IdeaServiceError):
    status_code = 500
    outcome = "recovery_failed"
    default_message = "Failed to process response. Please try again."


class UnexpectedError(IdeaServiceError):
    status_code = 500
    default_message = GENERIC_ERROR


__all__ = [
    "GENERIC_ERROR",
    "IdeaServiceError",
    "ClientInputError",
    "UnauthorizedError",
    "PayloadTooLargeError",
    "RateLimitError",
    "UpstreamRateLimitError",
    "UpstreamQuotaError",
    "UpstreamUnavailableError",
    "RecoveryFailureError",
    "UnexpectedError",
]
