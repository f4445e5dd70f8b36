"""Fixed-window rate limiter keyed by (caller, route).

Each key gets a window that starts at its first request and lasts
``window_ms``. Expired records are treated as absent on read, so the
periodic ``cleanup_store`` sweep only bounds memory and is never needed for
correctness.

Important:
    The check-then-increment runs under a process-local lock, so the cap is
    strict within one process. Separate processes (multiple workers) each
    enforce their own limits unless they share a store, and even then the
    sequence is not atomic across processes.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable

from portfolio_api.adapters.rate_limit.base import (
    AbstractRateLimitStore,
    RateLimitConfig,
    RateLimitRecord,
    RateLimitResult,
)
from portfolio_api.adapters.rate_limit.in_memory import InMemoryRateLimitStore

logger = logging.getLogger(__name__)


def build_rate_limit_key(caller_identifier: str, route_identifier: str) -> str:
    return f"{caller_identifier}:{route_identifier}"


class FixedWindowRateLimiter:
    """Rate limiter counting requests per key within fixed windows."""

    def __init__(
        self,
        store: AbstractRateLimitStore | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Record storage; defaults to a fresh in-memory store.
            clock: Time source returning UNIX time in seconds.
        """
        self._store = store if store is not None else InMemoryRateLimitStore()
        self._clock = clock
        self._lock = threading.RLock()

    @property
    def store(self) -> AbstractRateLimitStore:
        return self._store

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def check_rate_limit(self, caller_identifier: str, config: RateLimitConfig) -> RateLimitResult:
        """Count one request for ``caller_identifier`` against ``config``.

        Args:
            caller_identifier: Who is calling (e.g., client IP). Empty strings
                are accepted and simply form their own bucket.
            config: Limit and bucket name for the route.

        Returns:
            RateLimitResult; ``success`` is False once the window's quota is
            used up, in which case the record is left unchanged.
        """
        key = build_rate_limit_key(caller_identifier, config.identifier)

        with self._lock:
            now = self._now_ms()
            record = self._store.get(key)

            if record is None or record.is_expired(now):
                reset_time = now + config.window_ms
                self._store.set(key, RateLimitRecord(count=1, reset_time=reset_time))
                return RateLimitResult(
                    success=True,
                    remaining=config.max_requests - 1,
                    reset_time=reset_time,
                )

            if record.count >= config.max_requests:
                retry_after = math.ceil((record.reset_time - now) / 1000)
                return RateLimitResult(
                    success=False,
                    remaining=0,
                    reset_time=record.reset_time,
                    retry_after=retry_after,
                )

            record.count += 1
            self._store.set(key, record)
            return RateLimitResult(
                success=True,
                remaining=config.max_requests - record.count,
                reset_time=record.reset_time,
            )

    def cleanup_store(self) -> int:
        """Delete every record whose window has already ended.

        Returns:
            Number of records removed.
        """
        removed = 0
        with self._lock:
            now = self._now_ms()
            for key in list(self._store.keys()):
                record = self._store.get(key)
                if record is not None and record.reset_time < now:
                    self._store.delete(key)
                    removed += 1

        logger.debug("rate_limit.cleanup", extra={"removed": removed})
        return removed
