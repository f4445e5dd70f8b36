"""Cache-Control profiles for API responses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class CacheProfile:
    max_age: int
    s_max_age: int
    stale_while_revalidate: int


class CacheType(str, Enum):
    STATIC = "STATIC"  # 1 year
    DYNAMIC = "DYNAMIC"  # 1 hour, stale for 24 hours
    FREQUENT = "FREQUENT"  # 5 minutes, stale for 1 hour
    REALTIME = "REALTIME"  # never cached


CACHE_CONFIG: dict[CacheType, CacheProfile] = {
    CacheType.STATIC: CacheProfile(31_536_000, 31_536_000, 31_536_000),
    CacheType.DYNAMIC: CacheProfile(3600, 3600, 86_400),
    CacheType.FREQUENT: CacheProfile(300, 300, 3600),
    CacheType.REALTIME: CacheProfile(0, 0, 0),
}


def get_cache_control_header(cache_type: CacheType = CacheType.DYNAMIC) -> str:
    """Build the ``Cache-Control`` value for a cache profile."""

    profile = CACHE_CONFIG[CacheType(cache_type)]
    if profile.max_age == 0:
        return "no-cache, no-store, must-revalidate"

    return (
        f"public, max-age={profile.max_age}, s-maxage={profile.s_max_age}, "
        f"stale-while-revalidate={profile.stale_while_revalidate}"
    )
