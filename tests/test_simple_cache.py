"""Unit tests for the in-memory SimpleTTLCache."""

import threading

import pytest

from portfolio_api.utils import simple_cache
from portfolio_api.utils.simple_cache import SimpleTTLCache, build_cache_key


class FakeTime:
    """Deterministic clock used to test expiration logic."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def time(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


def test_build_cache_key_is_stable_and_sensitive_to_changes() -> None:
    assert build_cache_key("events", "octocat") == build_cache_key("events", "octocat")
    assert build_cache_key("events", "octocat") != build_cache_key("events", "hubot")
    assert build_cache_key("ab", "c") != build_cache_key("a", "bc")


def test_set_and_get_updates_hit_miss_counters() -> None:
    cache = SimpleTTLCache(ttl_seconds=10)

    assert cache.get("missing") is None
    cache.set("key", [{"id": "1"}])
    assert cache.get("key") == [{"id": "1"}]

    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1


def test_expired_entry_is_evicted(monkeypatch: pytest.MonkeyPatch) -> None:
    fake_time = FakeTime()
    monkeypatch.setattr(simple_cache, "time", fake_time)

    cache = SimpleTTLCache(ttl_seconds=5)
    cache.set("key", {"data": True})

    fake_time.advance(6)

    assert cache.get("key") is None
    assert cache.stats()["evictions"] == 1


def test_zero_ttl_disables_caching() -> None:
    cache = SimpleTTLCache(ttl_seconds=0)
    cache.set("key", {"v": 1})

    assert cache.get("key") is None
    assert cache.stats()["entries"] == 0


def test_lru_eviction_removes_least_recently_used() -> None:
    cache = SimpleTTLCache(ttl_seconds=100, max_entries=2)
    cache.set("a", {"v": 1})
    cache.set("b", {"v": 2})

    assert cache.get("a") == {"v": 1}

    cache.set("c", {"v": 3})

    assert cache.get("a") == {"v": 1}
    assert cache.get("c") == {"v": 3}
    assert cache.get("b") is None


def test_clear_resets_state() -> None:
    cache = SimpleTTLCache(ttl_seconds=10)
    cache.set("a", {"v": 1})
    cache.get("a")

    cache.clear()

    assert cache.stats() == {
        "ttl_seconds": 10,
        "max_entries": 256,
        "entries": 0,
        "hits": 0,
        "misses": 0,
        "evictions": 0,
    }


def test_thread_safety_under_concurrent_sets() -> None:
    cache = SimpleTTLCache(ttl_seconds=30, max_entries=None)

    def _writer(idx: int) -> None:
        cache.set(f"k-{idx}", {"v": idx})

    threads = [threading.Thread(target=_writer, args=(i,)) for i in range(50)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert cache.stats()["entries"] == 50
    assert cache.get("k-25") == {"v": 25}
