"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any application import so settings are
built from them, and the process-wide rate limiter is reset between tests so
quotas never leak from one test into another.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SITE_GITHUB_USER", "portfolio-owner")
os.environ.setdefault("SITE_CONTACT_EMAIL", "owner@example.com")
os.environ.setdefault("RATE_LIMIT_ENABLED", "true")

import pytest

from portfolio_api.core.rate_limit import reset_rate_limiter


@pytest.fixture(autouse=True)
def _fresh_rate_limiter():
    reset_rate_limiter()
    yield
    reset_rate_limiter()
