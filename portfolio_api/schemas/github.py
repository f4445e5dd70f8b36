"""Pydantic schemas for GitHub activity responses."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class GitHubActivityItem(BaseModel):
    """One public GitHub event, reduced to what the site displays."""

    id: str
    type: str = Field(..., description="GitHub event type, e.g. 'PushEvent'.")
    repo: str = Field(..., description="Repository full name (owner/name).")
    url: str = Field(..., description="Browser URL of the repository.")
    created_at: str


class GitHubActivityData(BaseModel):
    activity: List[GitHubActivityItem]
    count: int


class GitHubStats(BaseModel):
    total_events: int
    events_by_type: Dict[str, int] = Field(default_factory=dict)
    repositories: List[str] = Field(
        default_factory=list,
        description="Repositories touched, most recent first.",
    )
    last_active_at: str | None = None


class GitHubStatsData(BaseModel):
    stats: GitHubStats
