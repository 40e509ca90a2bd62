"""Resilient Envato Client: wraps httpx.AsyncClient with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - Transient errors (5xx, connection): max `max_retries` retries with backoff
    - Client errors (4xx except 429) and timeouts: immediate failure, no retry
    - All failures mapped to UpstreamAPIError (core/errors.py)
    - call() always returns a list of row dicts

Design Decisions:
    - Envato wraps list payloads in a single-key object ("results",
      "earnings-and-sales-by-month"); call() unwraps the first list value
    - ±25% jitter on backoff
"""

import asyncio
import logging
import random
from typing import Any

import httpx

from market_reports.core.errors import ErrorContext, UpstreamAPIError

logger = logging.getLogger(__name__)


class ResilientEnvatoClient:
    """Authenticated Envato Market API client with retry logic and error mapping."""

    USER_AGENT = "market-reports/1.0"

    def __init__(
        self,
        api_token: str,
        base_url: str = "https://api.envato.com",
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 30_000,
        timeout_seconds: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={
                "Authorization": f"Bearer {api_token}",
                "User-Agent": self.USER_AGENT,
            },
            transport=transport,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def call(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        api_version: str = "v3",
    ) -> list[dict]:
        """GET /{api_version}/{endpoint} with automatic retry on transient failures."""
        url = f"/{api_version}/{endpoint.lstrip('/')}"
        context = ErrorContext(endpoint=endpoint, page=(params or {}).get("page"))

        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.get(url, params=params)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if status_code == 429:
                    await self._handle_rate_limit(e, attempt, context)
                    continue
                if status_code >= 500:
                    await self._handle_transient_error(e, attempt, context)
                    continue
                raise UpstreamAPIError(
                    f"HTTP {status_code} for {endpoint}", "client_error",
                    context=context,
                )
            except httpx.TimeoutException:
                raise UpstreamAPIError(
                    "API timeout", "timeout", context=context,
                )
            except httpx.TransportError as e:
                await self._handle_transient_error(e, attempt, context)
                continue

            self._log_success(endpoint, params, attempt)
            return self._extract_rows(response, context)

        raise UpstreamAPIError(
            f"No response after {self.max_retries} retries", "connection_error",
            context=context,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    def _extract_rows(
        self, response: httpx.Response, context: ErrorContext,
    ) -> list[dict]:
        """Decode JSON body into a list of rows."""
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamAPIError(
                f"Invalid JSON body: {e}", "invalid_response", context=context,
            )
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict):
            for value in payload.values():
                if isinstance(value, list):
                    return value
        return []

    def _log_success(
        self, endpoint: str, params: dict[str, Any] | None, attempt: int,
    ) -> None:
        logger.info(
            "Envato API success",
            extra={
                "endpoint": endpoint,
                "page": (params or {}).get("page"),
                "attempt": attempt + 1,
            },
        )

    async def _handle_rate_limit(
        self, e: httpx.HTTPStatusError, attempt: int, context: ErrorContext,
    ) -> None:
        """Handle rate limit error with retry or raise."""
        retry_after_ms = self._extract_retry_after(e.response)
        if attempt >= self.max_retries:
            raise UpstreamAPIError(
                "Rate limit exceeded after retries",
                "rate_limit",
                retry_after_ms=retry_after_ms,
                context=context,
            )
        delay = retry_after_ms or self._backoff(attempt)
        logger.warning(
            f"Rate limit hit, retry after {delay}ms",
            extra={"endpoint": context.endpoint, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    async def _handle_transient_error(
        self, e: Exception, attempt: int, context: ErrorContext,
    ) -> None:
        """Handle transient errors with retry or raise."""
        if attempt >= self.max_retries:
            raise UpstreamAPIError(
                f"Transient failure after {self.max_retries} retries: {e}",
                "connection_error",
                context=context,
            )
        delay = self._backoff(attempt)
        logger.warning(
            f"Transient error, retry after {delay}ms: {e}",
            extra={"endpoint": context.endpoint, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _extract_retry_after(self, response: httpx.Response) -> int | None:
        """Retry-After header in milliseconds (seconds form only)."""
        val = response.headers.get("retry-after")
        if val and val.isdigit():
            return int(val) * 1000
        return None


# Singleton (initialized on startup)
envato_client: ResilientEnvatoClient | None = None


def init_envato_client(api_token: str, **kwargs: Any) -> ResilientEnvatoClient:
    global envato_client
    envato_client = ResilientEnvatoClient(api_token, **kwargs)
    return envato_client


async def close_envato_client() -> None:
    global envato_client
    if envato_client is not None:
        await envato_client.aclose()
        envato_client = None
