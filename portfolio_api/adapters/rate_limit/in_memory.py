"""In-memory rate limit store.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Individual operations are thread-safe; read-modify-write sequences are
  serialized by the limiter, not by the store.
"""

from __future__ import annotations

import threading

from portfolio_api.adapters.rate_limit.base import AbstractRateLimitStore, RateLimitRecord


class InMemoryRateLimitStore(AbstractRateLimitStore):
    """Dict-backed store for a single process."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: dict[str, RateLimitRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def get(self, key: str) -> RateLimitRecord | None:
        with self._lock:
            return self._records.get(key)

    def set(self, key: str, record: RateLimitRecord) -> None:
        with self._lock:
            self._records[key] = record

    def delete(self, key: str) -> None:
        with self._lock:
            self._records.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
