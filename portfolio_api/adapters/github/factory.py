"""Factory for the GitHub client used by the activity routes."""

from portfolio_api.adapters.github.base import AbstractGitHubClient
from portfolio_api.adapters.github.httpx_client import HttpxGitHubClient
from portfolio_api.core.config import settings


def create_github_client() -> AbstractGitHubClient:
    """Build a GitHub client from ``settings.site``."""
    return HttpxGitHubClient(
        base_url=settings.site.github_api_url,
        token=settings.site.github_token,
        timeout_seconds=settings.site.github_timeout_seconds,
    )
