from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from portfolio_api.adapters.github.factory import create_github_client
from portfolio_api.adapters.rate_limit.base import RateLimitConfig
from portfolio_api.api.responses import to_json_response
from portfolio_api.core.cache import CacheType
from portfolio_api.core.config import settings
from portfolio_api.core.errors import ErrorCode
from portfolio_api.core.rate_limit import rate_limit
from portfolio_api.core.responses import create_error_response, create_success_response
from portfolio_api.schemas.github import GitHubActivityData, GitHubStatsData
from portfolio_api.services.github_service import GitHubActivityService
from portfolio_api.utils.simple_cache import SimpleTTLCache

router = APIRouter(tags=["GitHub"])

GITHUB_RATE_LIMIT_IDENTIFIER = "github-activity-api"
MIN_LIMIT = 1
MAX_LIMIT = 50

_cache = SimpleTTLCache(ttl_seconds=settings.site.github_cache_ttl_seconds, max_entries=64)


def github_rate_limit_config() -> RateLimitConfig:
    return RateLimitConfig(
        max_requests=settings.rate_limit.github_max_requests,
        window_ms=settings.rate_limit.github_window_ms,
        identifier=GITHUB_RATE_LIMIT_IDENTIFIER,
    )


def get_github_service() -> GitHubActivityService:
    return GitHubActivityService(
        create_github_client(),
        user=settings.site.github_user,
        cache=_cache,
    )


def _parse_limit(raw: str) -> int | None:
    try:
        limit = int(raw)
    except ValueError:
        return None
    return limit if MIN_LIMIT <= limit <= MAX_LIMIT else None


@router.get(
    "/github/activity",
    dependencies=[Depends(rate_limit(github_rate_limit_config))],
)
async def github_activity(
    request: Request,
    activity_type: str = Query(
        "activity",
        alias="type",
        description="'activity' for recent events, 'stats' for a summary.",
    ),
    limit: str = Query("10", description="Number of events to return (1-50)."),
    service: GitHubActivityService = Depends(get_github_service),
) -> JSONResponse:
    """Recent public GitHub activity, or contribution stats with ``type=stats``.

    Upstream failures propagate as ``AppError`` and are normalized by the
    global exception handlers.
    """
    headers = request.state.rate_limit_headers

    parsed_limit = _parse_limit(limit)
    if parsed_limit is None:
        error = create_error_response(
            ErrorCode.VALIDATION_ERROR,
            f"Limit must be between {MIN_LIMIT} and {MAX_LIMIT}",
            {"field": "limit", "value": limit},
        )
        return to_json_response(error, headers=headers)

    if activity_type == "stats":
        stats = await service.contribution_stats()
        data = GitHubStatsData(stats=stats)
    else:
        activity = await service.recent_activity(parsed_limit)
        data = GitHubActivityData(activity=activity, count=len(activity))

    return to_json_response(
        create_success_response(data.model_dump()),
        cache_type=CacheType.DYNAMIC,
        headers=headers,
    )
