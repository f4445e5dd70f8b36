from portfolio_api.adapters.github.base import AbstractGitHubClient
from portfolio_api.adapters.github.factory import create_github_client
from portfolio_api.adapters.github.httpx_client import HttpxGitHubClient

__all__ = [
    "AbstractGitHubClient",
    "HttpxGitHubClient",
    "create_github_client",
]
