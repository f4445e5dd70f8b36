"""Application-level error codes and exception types.

Every failure that reaches an API boundary resolves to exactly one
``ErrorCode``; the HTTP status is always derived from that code so clients
see a deterministic status for a given error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable error codes shared by all API routes."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    BAD_REQUEST = "BAD_REQUEST"

    # Server errors (5xx)
    SERVER_ERROR = "SERVER_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
    DATABASE_ERROR = "DATABASE_ERROR"
    EXTERNAL_API_ERROR = "EXTERNAL_API_ERROR"


STATUS_CODE_BY_ERROR: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.SERVER_ERROR: 500,
    ErrorCode.SERVICE_UNAVAILABLE: 503,
    ErrorCode.TIMEOUT: 504,
    ErrorCode.DATABASE_ERROR: 500,
    ErrorCode.EXTERNAL_API_ERROR: 502,
}

DEFAULT_STATUS_CODE = 500


def get_status_code_for_error(code: ErrorCode | str) -> int:
    """Map an error code to its HTTP status.

    Args:
        code: ``ErrorCode`` member or its string value.

    Returns:
        The HTTP status code; 500 for anything not in the mapping.
    """

    try:
        return STATUS_CODE_BY_ERROR[ErrorCode(code)]
    except (KeyError, ValueError):
        return DEFAULT_STATUS_CODE


@dataclass(eq=False)
class AppError(Exception):
    """Base error for failures that are already classified.

    Attributes:
        code: Error code the failure maps to.
        message: Human-readable error message (safe to show clients).
        details: Optional JSON-serializable context for clients.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return get_status_code_for_error(self.code)


class ValidationAppError(AppError):
    """Raised when request input fails validation."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.VALIDATION_ERROR, message, details)


class ExternalAPIAppError(AppError):
    """Raised when an upstream service (GitHub, etc.) fails."""


class RateLimitExceededError(AppError):
    """Raised by the rate limit dependency when a caller exhausts its quota.

    Carries the rate limit headers so the exception handler can attach them
    to the 429 response.
    """

    def __init__(self, retry_after: int, headers: dict[str, str] | None = None) -> None:
        super().__init__(
            ErrorCode.RATE_LIMITED,
            "Too many requests. Please try again later.",
            {"retryAfter": retry_after},
        )
        self.retry_after = retry_after
        self.headers = headers or {}
