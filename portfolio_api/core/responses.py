"""Error/response normalizer shared by every API route.

``handle_error`` is the single funnel from "whatever went wrong" to an
``APIError``. Classification of plain exceptions is a substring match on the
lower-cased message, evaluated against ``CLASSIFICATION_RULES`` in order;
the first matching rule wins and unmatched messages fall through to
``SERVER_ERROR``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from portfolio_api.core.errors import AppError, ErrorCode, get_status_code_for_error
from portfolio_api.schemas.responses import APIError, APIResponse

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


@dataclass(frozen=True)
class ClassificationRule:
    """Map error messages containing any of ``patterns`` to ``code``.

    Attributes:
        patterns: Lower-case substrings to look for.
        code: Error code assigned on match.
        message_override: Replaces the original message when set.
    """

    patterns: tuple[str, ...]
    code: ErrorCode
    message_override: str | None = None

    def matches(self, message: str) -> bool:
        lowered = message.lower()
        return any(pattern in lowered for pattern in self.patterns)


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(("validation", "invalid"), ErrorCode.VALIDATION_ERROR),
    ClassificationRule(("not found", "404"), ErrorCode.NOT_FOUND),
    ClassificationRule(("unauthorized", "401"), ErrorCode.UNAUTHORIZED),
    ClassificationRule(("timeout", "etimedout"), ErrorCode.TIMEOUT, "Request timeout"),
    ClassificationRule(("rate limit", "429"), ErrorCode.RATE_LIMITED, "Rate limit exceeded"),
)


@dataclass
class ValidationResult:
    is_valid: bool
    missing_fields: list[str] = field(default_factory=list)


def _format_utc(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_timestamp() -> str:
    """Return the current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    return _format_utc(datetime.now(timezone.utc))


def format_epoch_ms(epoch_ms: int) -> str:
    """Format epoch milliseconds in the same ISO form as ``utc_timestamp``."""

    return _format_utc(datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc))


def create_error_response(
    code: ErrorCode,
    message: str,
    details: dict[str, Any] | None = None,
) -> APIError:
    """Build a standardized error response.

    Args:
        code: Error code; also determines ``statusCode``.
        message: Human-readable message.
        details: Optional diagnostic payload, copied through unchanged.

    Returns:
        APIError stamped with the current timestamp.
    """

    code = ErrorCode(code)
    return APIError(
        error=code,
        message=message,
        code=code.value,
        timestamp=utc_timestamp(),
        status_code=get_status_code_for_error(code),
        details=details,
    )


def create_success_response(data: Any, message: str | None = None) -> APIResponse[Any]:
    """Build a standardized success response.

    ``message`` is accepted for call-site compatibility but is not part of the
    success payload.
    """

    return APIResponse(data=data, timestamp=utc_timestamp())


def _describe(value: object) -> str:
    try:
        return str(value)
    except Exception:
        return type(value).__name__


def _extract_message(error: object) -> str | None:
    try:
        message = getattr(error, "message", None)
        if isinstance(message, str):
            return message
        if isinstance(error, BaseException):
            return str(error)
    except Exception:
        return None
    return None


def handle_error(error: object) -> APIError:
    """Classify an arbitrary caught value into an ``APIError``.

    Never raises. ``AppError`` instances keep their own classification;
    other exceptions are matched against ``CLASSIFICATION_RULES``.

    Args:
        error: Any value caught at a route boundary.

    Returns:
        The normalized error response.
    """

    if isinstance(error, AppError):
        return create_error_response(error.code, error.message, error.details)

    message = _extract_message(error)
    if message is None:
        return create_error_response(
            ErrorCode.SERVER_ERROR,
            GENERIC_ERROR_MESSAGE,
            {"originalError": _describe(error)},
        )

    for rule in CLASSIFICATION_RULES:
        if rule.matches(message):
            return create_error_response(rule.code, rule.message_override or message)

    return create_error_response(
        ErrorCode.SERVER_ERROR,
        message,
        {"originalError": message},
    )


def validate_email(value: str) -> bool:
    """Loose email check: ``local@domain.tld`` with no spaces or extra ``@``."""

    return bool(EMAIL_PATTERN.fullmatch(value))


def validate_required_fields(
    data: Mapping[str, Any],
    required_fields: Sequence[str],
) -> ValidationResult:
    """Report which required fields are missing from ``data``.

    A field is missing when its value is falsy or a whitespace-only string.
    ``missing_fields`` preserves the order of ``required_fields``.
    """

    missing_fields: list[str] = []
    for name in required_fields:
        value = data.get(name)
        if not value or (isinstance(value, str) and not value.strip()):
            missing_fields.append(str(name))

    return ValidationResult(is_valid=not missing_fields, missing_fields=missing_fields)
