"""Rate limiter types and storage interface.

The limiter depends on ``AbstractRateLimitStore`` (not a concrete dict) so
the in-memory backend can later be swapped for a shared store (e.g., Redis)
without changing call sites.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable


@dataclass
class RateLimitRecord:
    """Counter for one (caller, route) window.

    Attributes:
        count: Requests observed in the current window.
        reset_time: Epoch milliseconds when the window expires.
    """

    count: int
    reset_time: int

    def is_expired(self, now_ms: int) -> bool:
        return now_ms > self.reset_time


@dataclass(frozen=True)
class RateLimitConfig:
    """Per-route limit configuration.

    Attributes:
        max_requests: Requests allowed per window.
        window_ms: Window length in milliseconds.
        identifier: Quota bucket name, so one caller gets independent limits
            per route (e.g., "contact-form", "github-activity-api").
    """

    max_requests: int
    window_ms: int
    identifier: str = "default"

    def __post_init__(self) -> None:
        if self.max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if self.window_ms < 1:
            raise ValueError("window_ms must be >= 1")


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a rate limit check.

    Attributes:
        success: Whether the request may proceed.
        remaining: Requests left in the current window (0 when blocked).
        reset_time: Epoch milliseconds when the current window resets.
        retry_after: Seconds to wait before retrying; only set when blocked.
    """

    success: bool
    remaining: int
    reset_time: int
    retry_after: int | None = None


class AbstractRateLimitStore(ABC):
    """Key-value storage for rate limit records."""

    @abstractmethod
    def get(self, key: str) -> RateLimitRecord | None:
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, record: RateLimitRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; missing keys are ignored."""
        raise NotImplementedError

    @abstractmethod
    def keys(self) -> Iterable[str]:
        """Return a snapshot of stored keys."""
        raise NotImplementedError
