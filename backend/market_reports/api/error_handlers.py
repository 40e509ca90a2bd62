"""Error Handlers: report failures to JSON error envelopes.

Invariants:
    - ReportsError answers with its own http_status (502 upstream, 503 cache)
      and to_response() body; the log line carries error_code plus whichever
      of endpoint / page / cache_key the failure recorded
    - Log level follows ErrorSeverity
    - Upstream rate limits pass their Retry-After hint on to the caller
    - Invalid query parameters → 400, one detail per offending parameter
    - Anything else → 500 INTERNAL_ERROR, nothing internal in the body
"""

import logging
import math

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from market_reports.core.errors import (
    ErrorCategory, ErrorSeverity, ReportsError, UpstreamAPIError,
)

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReportsError, _reports_error_handler)
    app.add_exception_handler(RequestValidationError, _invalid_query_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)


def _failure_extras(exc: ReportsError, path: str) -> dict:
    extras = {"error_code": exc.code, "status_code": exc.http_status, "path": path}
    for name in ("endpoint", "page", "cache_key"):
        value = getattr(exc.context, name)
        if value is not None:
            extras[name] = value
    return extras


async def _reports_error_handler(request: Request, exc: ReportsError):
    logger.log(
        _LOG_LEVELS.get(exc.severity, logging.ERROR),
        f"{exc.code}: {exc.message}",
        extra=_failure_extras(exc, request.url.path),
    )
    headers = None
    if isinstance(exc, UpstreamAPIError) and exc.context.retry_after_ms:
        headers = {"Retry-After": str(math.ceil(exc.context.retry_after_ms / 1000))}
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )


async def _invalid_query_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "parameter": str(error["loc"][-1]),
            "location": str(error["loc"][0]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    logger.warning(
        f"Rejected report query: {[d['parameter'] for d in details]}",
        extra={"path": request.url.path, "status_code": 400},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid report query",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.WARNING.value,
                "details": details,
            },
        },
    )


async def _unexpected_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled {type(exc).__name__} while building report",
        exc_info=True,
        extra={"path": request.url.path, "status_code": 500},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )
