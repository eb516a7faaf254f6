"""
Exception handlers.

Maps module exceptions to JSON error responses:

- EtuError subclasses render their status_code and to_dict()
- RateLimitExceededError adds Retry-After and X-RateLimit-* headers
- Request validation errors become 400 with a field list
- HTTPException becomes {"error": detail}
- Anything else is logged and becomes a generic 500
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.exceptions import EtuError, ExternalServiceError, RateLimitExceededError

logger = logging.getLogger(__name__)


def rate_limit_headers(exc: RateLimitExceededError) -> dict[str, str]:
    """Headers for a throttled response."""
    reset = datetime.fromtimestamp(exc.reset_at / 1000, tz=timezone.utc)
    return {
        "Retry-After": str(exc.retry_after),
        "X-RateLimit-Limit": str(exc.limit),
        "X-RateLimit-Remaining": "0",
        "X-RateLimit-Reset": reset.isoformat().replace("+00:00", "Z"),
    }


async def etu_error_handler(request: Request, exc: EtuError) -> JSONResponse:
    headers = None
    if isinstance(exc, RateLimitExceededError):
        headers = rate_limit_headers(exc)
    elif isinstance(exc, ExternalServiceError):
        logger.error(
            "External service failure on %s %s: %s (%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.details,
        )
    elif exc.status_code >= 500:
        logger.error("Error on %s %s: %s", request.method, request.url.path, exc.message)

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for error in exc.errors():
        # First loc entry is the source (body, query, path)
        location = [str(part) for part in error.get("loc", ())[1:]]
        details.append({
            "field": ".".join(location) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return JSONResponse(
        status_code=400,
        content={"error": "Validation Error", "details": details},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    """Install all handlers on an application."""
    app.add_exception_handler(EtuError, etu_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
