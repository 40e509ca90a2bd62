"""Error Hierarchy: typed, categorized exceptions for report failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Upstream failures are never retried here; the API client owns retry policy
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with ReportsError base: the FastAPI handler catches all
    - ErrorContext as dataclass: observability data without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    CACHE = "cache"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    endpoint: str | None = None
    page: int | None = None
    cache_key: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class ReportsError(Exception):
    """Base exception for all report engine errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "endpoint": self.context.endpoint,
                    "page": self.context.page,
                    "retry_after_ms": self.context.retry_after_ms,
                    "cache_key": self.context.cache_key,
                },
            }
        }


# ─── Upstream Errors (502) ──────────────────────────────────────

class UpstreamAPIError(ReportsError):
    """Envato API call failed (after the client's own retries)."""
    def __init__(
        self,
        message: str,
        api_error_type: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Envato API error ({api_error_type}): {message}",
            "UPSTREAM_API_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 502,
        )
        self.api_error_type = api_error_type


class UpstreamPaginationError(ReportsError):
    """Statement pagination hit the page ceiling without an empty page."""
    def __init__(self, max_pages: int, context: ErrorContext | None = None):
        super().__init__(
            f"Upstream statement did not terminate within {max_pages} pages",
            "UPSTREAM_PAGINATION_EXCEEDED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.max_pages = max_pages


# ─── Infrastructure Errors (503) ────────────────────────────────

class CacheStoreError(ReportsError):
    """Cache store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cache {operation} failed: {message}",
            "CACHE_STORE_ERROR", ErrorCategory.CACHE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
