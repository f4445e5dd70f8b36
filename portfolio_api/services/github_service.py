"""GitHub activity service: fetch public events, cache them, and summarize."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from portfolio_api.adapters.github.base import AbstractGitHubClient
from portfolio_api.schemas.github import GitHubActivityItem, GitHubStats
from portfolio_api.utils.simple_cache import SimpleTTLCache, build_cache_key

logger = logging.getLogger(__name__)

# GitHub caps the public events page size at 100
MAX_EVENTS_PAGE = 100


def _to_activity_item(event: dict[str, Any]) -> GitHubActivityItem:
    repo_name = (event.get("repo") or {}).get("name", "")
    return GitHubActivityItem(
        id=str(event.get("id", "")),
        type=str(event.get("type", "")),
        repo=repo_name,
        url=f"https://github.com/{repo_name}" if repo_name else "",
        created_at=str(event.get("created_at", "")),
    )


class GitHubActivityService:
    """Expose recent activity and contribution stats for one GitHub user."""

    def __init__(
        self,
        client: AbstractGitHubClient,
        *,
        user: str,
        cache: SimpleTTLCache | None = None,
    ) -> None:
        self._client = client
        self._user = user
        self._cache = cache

    async def _events(self) -> list[dict[str, Any]]:
        cache_key = build_cache_key("events", self._user)
        if self._cache is not None:
            cached = self._cache.get(cache_key)
            if cached is not None:
                return cached

        events = await self._client.list_public_events(self._user, per_page=MAX_EVENTS_PAGE)
        logger.info("github.events_fetched", extra={"github_user": self._user, "event_count": len(events)})

        if self._cache is not None:
            self._cache.set(cache_key, events)
        return events

    async def recent_activity(self, limit: int) -> list[GitHubActivityItem]:
        """Return up to ``limit`` most recent public events."""
        events = await self._events()
        return [_to_activity_item(event) for event in events[:limit]]

    async def contribution_stats(self) -> GitHubStats:
        """Summarize the public event window GitHub exposes (last 90 days)."""
        items = [_to_activity_item(event) for event in await self._events()]

        repositories: list[str] = []
        for item in items:
            if item.repo and item.repo not in repositories:
                repositories.append(item.repo)

        return GitHubStats(
            total_events=len(items),
            events_by_type=dict(Counter(item.type for item in items)),
            repositories=repositories,
            last_active_at=items[0].created_at if items else None,
        )
