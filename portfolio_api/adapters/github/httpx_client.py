"""GitHub REST client adapter built on httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from portfolio_api.adapters.github.base import AbstractGitHubClient
from portfolio_api.core.errors import AppError, ErrorCode, ExternalAPIAppError

logger = logging.getLogger(__name__)


class HttpxGitHubClient(AbstractGitHubClient):
    """Client for the public GitHub REST API.

    Upstream failures are raised as classified ``AppError`` instances so the
    route boundary never has to guess from exception text.
    """

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        token: str | None = None,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: GitHub REST API base URL.
            token: Optional token to raise the anonymous rate limit.
            timeout_seconds: Per-request timeout in seconds.
            transport: Optional httpx transport (tests use ``httpx.MockTransport``).
        """
        headers = {"Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._base_url = base_url.rstrip("/")
        self._headers = headers
        self._timeout = timeout_seconds
        self._transport = transport

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        async with httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(path, params=params)
            except httpx.TimeoutException as exc:
                logger.warning("github.timeout", extra={"path": path})
                raise AppError(ErrorCode.TIMEOUT, "Request timeout") from exc
            except httpx.HTTPError as exc:
                logger.warning("github.transport_error", extra={"path": path, "error_type": type(exc).__name__})
                raise ExternalAPIAppError(
                    ErrorCode.EXTERNAL_API_ERROR,
                    "GitHub is unreachable",
                ) from exc

        if response.status_code == 404:
            raise AppError(ErrorCode.NOT_FOUND, "GitHub user not found")
        if response.status_code >= 400:
            logger.warning(
                "github.upstream_error",
                extra={"path": path, "upstream_status": response.status_code},
            )
            raise ExternalAPIAppError(
                ErrorCode.EXTERNAL_API_ERROR,
                f"GitHub {response.status_code}",
                {"upstreamStatus": response.status_code},
            )

        return response.json()

    async def list_public_events(self, user: str, *, per_page: int = 30) -> list[dict[str, Any]]:
        events = await self._get_json(f"/users/{user}/events/public", {"per_page": per_page})
        if not isinstance(events, list):
            raise ExternalAPIAppError(
                ErrorCode.EXTERNAL_API_ERROR,
                "Unexpected GitHub response format",
            )
        return events
