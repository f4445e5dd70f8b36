from __future__ import annotations

from portfolio_api.api.routes.contact import router as contact_router
from portfolio_api.api.routes.github import router as github_router
from portfolio_api.api.routes.health import router as health_router

__all__ = ["contact_router", "github_router", "health_router"]
