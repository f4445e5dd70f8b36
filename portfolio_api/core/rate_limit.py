"""Rate limiting wiring for FastAPI routes.

This module wires the fixed-window limiter into the HTTP layer.

Design goals:
- Minimal coupling: routes depend on ``rate_limit(config)`` only.
- Swap-friendly: the limiter's store can be replaced (e.g., Redis) behind
  ``AbstractRateLimitStore``.
- Independent quotas: each route passes its own ``RateLimitConfig`` so a
  caller exhausting one route keeps its budget on the others.

Callers are identified by client IP (see ``get_client_ip``).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Union

from fastapi import Request

from portfolio_api.adapters.rate_limit.base import RateLimitConfig, RateLimitResult
from portfolio_api.adapters.rate_limit.fixed_window import FixedWindowRateLimiter
from portfolio_api.core.config import settings
from portfolio_api.core.errors import RateLimitExceededError
from portfolio_api.core.responses import format_epoch_ms
from portfolio_api.core.security import get_client_ip, hash_identifier

logger = logging.getLogger(__name__)

ConfigSource = Union[RateLimitConfig, Callable[[], RateLimitConfig]]

_limiter: FixedWindowRateLimiter | None = None


def get_rate_limiter() -> FixedWindowRateLimiter:
    """Return the process-wide limiter, creating it on first use.

    The instance is cached in-module to preserve counts across requests.
    """

    global _limiter

    if _limiter is None:
        _limiter = FixedWindowRateLimiter()
    return _limiter


def reset_rate_limiter(limiter: FixedWindowRateLimiter | None = None) -> None:
    """Replace the process-wide limiter (a fresh one when ``limiter`` is None)."""

    global _limiter
    _limiter = limiter


def check_rate_limit(caller_identifier: str, config: RateLimitConfig) -> RateLimitResult:
    return get_rate_limiter().check_rate_limit(caller_identifier, config)


def cleanup_rate_limit_store() -> int:
    return get_rate_limiter().cleanup_store()


def get_rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Format a limiter result as HTTP response headers.

    ``Retry-After`` is only included when the request was rejected.
    """

    headers = {
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": format_epoch_ms(result.reset_time),
    }
    if result.retry_after is not None:
        headers["Retry-After"] = str(result.retry_after)
    return headers


def rate_limit(config: ConfigSource) -> Callable[[Request], Awaitable[RateLimitResult | None]]:
    """Build a FastAPI dependency enforcing ``config`` per client IP.

    On success the rate limit headers are stored on
    ``request.state.rate_limit_headers`` so the route can attach them to its
    response.

    Args:
        config: Route config, or a zero-argument callable returning it (read
            at request time so settings overrides apply).

    Returns:
        Dependency callable usable with ``Depends``.
    """

    async def enforce_rate_limit(request: Request) -> RateLimitResult | None:
        """Consume one request from the caller's budget for this route.

        Raises:
            RateLimitExceededError: When the caller exceeded the route quota.
        """
        request.state.rate_limit_headers = {}
        if not settings.rate_limit.enabled:
            return None

        route_config = config() if callable(config) else config
        client_ip = get_client_ip(request)
        result = check_rate_limit(client_ip, route_config)

        headers = get_rate_limit_headers(result) if settings.rate_limit.include_headers else {}
        log_fields = {
            "route_identifier": route_config.identifier,
            "key_hash": hash_identifier(client_ip),
            "limit": route_config.max_requests,
            "remaining": result.remaining,
            "window_ms": route_config.window_ms,
        }

        if result.success:
            logger.info("rate_limit.allowed", extra=log_fields)
            request.state.rate_limit_headers = headers
            return result

        retry_after = result.retry_after or 0
        logger.warning("rate_limit.exceeded", extra={**log_fields, "retry_after_s": retry_after})
        raise RateLimitExceededError(retry_after=retry_after, headers=headers)

    return enforce_rate_limit


async def run_periodic_cleanup(interval_seconds: float) -> None:
    """Sweep expired rate limit records every ``interval_seconds`` until cancelled."""

    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = cleanup_rate_limit_store()
        except Exception:
            logger.exception("rate_limit.cleanup_failed")
            continue
        logger.info("rate_limit.cleanup_completed", extra={"removed": removed})
