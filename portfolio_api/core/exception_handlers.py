"""Global exception handlers for consistent error responses.

This module is the route boundary: every error that escapes a route is
passed through ``handle_error`` (or mapped to an ``ErrorCode`` for framework
errors) and returned as an ``APIError`` with its ``statusCode`` as the HTTP
status.

Design:
- AppError subclasses → their own ErrorCode
- Errors on rate limited routes keep the X-RateLimit-* headers (429 adds Retry-After)
- Request body/query validation → 400 VALIDATION_ERROR
- Starlette HTTPException → ErrorCode matching its status
- Unexpected Exception → handle_error classification (safety net)
- No stack traces are serialized to clients
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_api.api.responses import to_json_response
from portfolio_api.core.errors import AppError, ErrorCode, RateLimitExceededError
from portfolio_api.core.logging import get_request_id
from portfolio_api.core.responses import create_error_response, handle_error

logger = logging.getLogger(__name__)

ERROR_CODE_BY_HTTP_STATUS: dict[int, ErrorCode] = {
    400: ErrorCode.BAD_REQUEST,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    429: ErrorCode.RATE_LIMITED,
    503: ErrorCode.SERVICE_UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


def _rate_limit_headers(request: Request) -> dict[str, str]:
    """Headers stored by the rate limit dependency, if it ran for this request."""
    return dict(getattr(request.state, "rate_limit_headers", None) or {})


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle already-classified application errors.

    Responses on rate limited routes carry the ``X-RateLimit-*`` headers;
    rejections additionally carry ``Retry-After``.
    """
    error = handle_error(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": error.code,
            "error_message": error.message,
            "status_code": error.status_code,
            "has_details": bool(error.details),
            "request_path": request.url.path,
            "request_id": get_request_id(),
        },
    )

    headers = _rate_limit_headers(request)
    if isinstance(exc, RateLimitExceededError):
        headers.update(exc.headers)
    return to_json_response(error, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map FastAPI request parsing failures to a 400 VALIDATION_ERROR."""
    errors = [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": err.get("msg", ""),
        }
        for err in exc.errors()
    ]

    logger.info(
        "request_validation_failed",
        extra={
            "request_path": request.url.path,
            "error_count": len(errors),
            "request_id": get_request_id(),
        },
    )

    error = create_error_response(
        ErrorCode.VALIDATION_ERROR,
        "Request validation failed",
        {"errors": errors},
    )
    return to_json_response(error, headers=_rate_limit_headers(request))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Map framework HTTP errors (unknown route, wrong method) to an ErrorCode."""
    if exc.status_code >= 500:
        code = ERROR_CODE_BY_HTTP_STATUS.get(exc.status_code, ErrorCode.SERVER_ERROR)
    else:
        code = ERROR_CODE_BY_HTTP_STATUS.get(exc.status_code, ErrorCode.BAD_REQUEST)

    error = create_error_response(code, str(exc.detail))
    return to_json_response(error, headers=getattr(exc, "headers", None))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs the failure for debugging and classifies it via ``handle_error``.
    """
    error = handle_error(exc)

    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_code": error.code,
            "status_code": error.status_code,
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
        exc_info=exc,
    )

    return to_json_response(error, headers=_rate_limit_headers(request))


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> from portfolio_api.core.exception_handlers import setup_exception_handlers
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
