"""Error Handlers: BookCircleError, request validation and the catch-all, as JSON envelopes.

Invariants:
    - Every error body is {"error": {code, message, category, severity, ...}}
    - 429 responses carry Retry-After (whole seconds, at least 1)
    - 4xx domain errors log at WARNING, 5xx at ERROR with the owning user id
    - Pydantic validation failures are 400 VALIDATION_ERROR, one detail per field
    - Unhandled exceptions are 500 INTERNAL_ERROR and never echo the exception
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bookcircle.core.errors import BookCircleError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)

# Leading loc element names the request part, not the field
_REQUEST_PARTS = {"body", "query", "path", "header", "cookie"}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookCircleError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _retry_after_header(exc: BookCircleError) -> dict[str, str] | None:
    retry_ms = exc.context.retry_after_ms
    if exc.http_status != status.HTTP_429_TOO_MANY_REQUESTS or retry_ms is None:
        return None
    return {"Retry-After": str(max(1, -(-retry_ms // 1000)))}


async def handle_domain_error(request: Request, exc: BookCircleError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "user_id": exc.context.user_id,
            "resource_type": exc.context.resource_type,
            "resource_id": exc.context.resource_id,
        },
    )
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_response(),
        headers=_retry_after_header(exc),
    )


def _field_errors(exc: RequestValidationError) -> list[dict]:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err["loc"]]
        location = loc[0] if loc and loc[0] in _REQUEST_PARTS else None
        field = ".".join(loc[1:] if location else loc)
        details.append({
            "field": field or (location or ""),
            "location": location,
            "message": err["msg"],
            "type": err["type"],
        })
    return details


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = _field_errors(exc)
    logger.warning(
        f"Invalid request on {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "details": details,
            },
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        },
    )
