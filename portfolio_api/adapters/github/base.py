from abc import ABC, abstractmethod
from typing import Any


class AbstractGitHubClient(ABC):
    """Interface for fetching public GitHub data."""

    @abstractmethod
    async def list_public_events(self, user: str, *, per_page: int = 30) -> list[dict[str, Any]]:
        """Return the user's most recent public events, newest first.

        Args:
            user: GitHub login.
            per_page: Maximum number of events to request.

        Returns:
            Raw event objects as returned by the GitHub REST API.

        Raises:
            AppError: Classified upstream failure (timeout, not found, other).
        """
        ...
