"""Turn normalized API results into JSON responses with standard headers."""

from __future__ import annotations

from typing import Mapping

from fastapi.responses import JSONResponse

from portfolio_api.core.cache import CacheType, get_cache_control_header
from portfolio_api.core.security import get_security_headers
from portfolio_api.schemas.responses import APIError, APIResult


def to_json_response(
    result: APIResult,
    *,
    cache_type: CacheType = CacheType.REALTIME,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Serialize an ``APIResponse``/``APIError`` with security and cache headers.

    Errors use their ``statusCode`` as the HTTP status and are never cached.
    """

    if isinstance(result, APIError):
        status_code = result.status_code
        cache_type = CacheType.REALTIME
    else:
        status_code = 200

    response_headers = get_security_headers()
    response_headers["Cache-Control"] = get_cache_control_header(cache_type)
    if headers:
        response_headers.update(headers)

    return JSONResponse(
        status_code=status_code,
        content=result.to_wire(),
        headers=response_headers,
    )
