"""Envato Reports: cache-aware yearly and monthly earnings report builders.

Invariants:
    - A narrower range is answered from a cached full month when one exists;
      a cached exact range always wins over the month-derived result
    - Statement pages are requested strictly in sequence until an empty page;
      more than max_pages non-empty pages raises UpstreamPaginationError
    - Fresh envelopes are cached under the range key only, never the month key,
      and never when they hold zero sales
    - Upstream errors propagate unchanged (the API client owns retries)
    - Item-filtered reports skip the sales display cap

Design Decisions:
    - Collaborators injected through MarketApi / CacheStore protocols
    - Cached values are snapshots (core/envelope_snapshot.py), rebuilt on read
"""

import logging
from collections.abc import Callable
from datetime import date

from market_reports.core.envelope_snapshot import from_snapshot, to_snapshot
from market_reports.core.errors import ErrorContext, UpstreamPaginationError
from market_reports.core.report_filters import (
    build_envelope, filter_by_item, filter_by_range, truncate_sales,
)
from market_reports.core.report_protocols import CacheStore, MarketApi
from market_reports.core.report_types import ReportEnvelope
from market_reports.core.report_window import (
    DateWindow, choose_report_ttl, one_month_ttl, resolve_date_window,
)
from market_reports.core.statement import normalize_statement
from market_reports.core.yearly import (
    YearlyReport, build_yearly_report, yearly_cache_key,
)

logger = logging.getLogger(__name__)


class EnvatoReports:
    """Builds earnings reports from the Envato statement API through a cache."""

    STATEMENT_ENDPOINT = "market/user/statement"
    STATEMENT_API_VERSION = "v3"
    MONTHLY_HISTORY_ENDPOINT = "market/private/user/earnings-and-sales-by-month.json"
    MONTHLY_HISTORY_API_VERSION = "v1"

    def __init__(
        self,
        api: MarketApi,
        cache: CacheStore,
        max_pages: int = 200,
        display_limit: int = 50,
        clock: Callable[[], date] = date.today,
    ):
        self._api = api
        self._cache = cache
        self._max_pages = max_pages
        self._display_limit = display_limit
        self._clock = clock

    async def get_yearly_earnings(self, year: int | None = None) -> YearlyReport:
        """Earnings and sales per month of `year` (default: current year)."""
        today = self._clock()
        year = int(year) if year is not None else today.year
        key = yearly_cache_key(year)

        history = await self._cache.get(key) if await self._cache.has(key) else None
        if history is None:
            history = await self._api.call(
                self.MONTHLY_HISTORY_ENDPOINT, {}, self.MONTHLY_HISTORY_API_VERSION,
            )
            ttl = one_month_ttl(today)
            await self._cache.put(key, history, ttl)
            logger.info(
                "Cached earnings history",
                extra={"cache_key": key, "rows": len(history),
                       "ttl_seconds": int(ttl.total_seconds())},
            )

        return build_yearly_report(history, year)

    async def get_monthly_earnings(
        self,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
        to_day: int | None = None,
        envato_item_id: int | None = None,
    ) -> ReportEnvelope:
        """Sales, daily series, totals and item ranking for a month or day range."""
        today = self._clock()
        window = resolve_date_window(
            today, year=year, month=month, day=day, to_day=to_day,
        )

        envelope = await self._from_cached_month(window)
        cached_range = await self._cached_envelope(window.range_key)
        if cached_range is not None:
            envelope = cached_range
        if envelope is None:
            envelope = await self._fetch_and_build(window, today)

        if envato_item_id is not None:
            return filter_by_item(envelope, envato_item_id)

        return truncate_sales(envelope, self._display_limit)

    async def _cached_envelope(self, key: str) -> ReportEnvelope | None:
        if not await self._cache.has(key):
            return None
        snapshot = await self._cache.get(key)
        return from_snapshot(snapshot) if snapshot is not None else None

    async def _from_cached_month(self, window: DateWindow) -> ReportEnvelope | None:
        """Derive a sub-range report from the cached full month, if any."""
        if window.month_key is None:
            return None
        month = await self._cached_envelope(window.month_key)
        if month is None:
            return None
        logger.info(
            "Range answered from cached month",
            extra={"cache_key": window.month_key},
        )
        return filter_by_range(month, window.start, window.end)

    async def _fetch_and_build(self, window: DateWindow, today: date) -> ReportEnvelope:
        rows = await self._fetch_statement(window)
        if not rows:
            logger.info(
                "Empty statement for window, not cached",
                extra={"cache_key": window.range_key},
            )
            return ReportEnvelope()

        envelope = build_envelope(normalize_statement(rows))
        if envelope.sales:
            ttl = choose_report_ttl(window, today)
            await self._cache.put(window.range_key, to_snapshot(envelope), ttl)
            logger.info(
                "Cached monthly report",
                extra={"cache_key": window.range_key, "rows": len(rows),
                       "ttl_seconds": int(ttl.total_seconds())},
            )
        return envelope

    async def _fetch_statement(self, window: DateWindow) -> list[dict]:
        """Concatenate statement pages until the upstream returns an empty one."""
        rows: list[dict] = []
        # page max_pages + 1 may only be the empty terminator
        for page in range(1, self._max_pages + 2):
            batch = await self._api.call(
                self.STATEMENT_ENDPOINT,
                {
                    "from_date": window.start.isoformat(),
                    "to_date": window.end.isoformat(),
                    "page": page,
                },
                self.STATEMENT_API_VERSION,
            )
            if not batch:
                return rows
            if page > self._max_pages:
                break
            rows.extend(batch)

        logger.error(
            f"Statement pagination exceeded {self._max_pages} pages",
            extra={"endpoint": self.STATEMENT_ENDPOINT, "page": self._max_pages + 1},
        )
        raise UpstreamPaginationError(
            self._max_pages,
            ErrorContext(endpoint=self.STATEMENT_ENDPOINT, page=self._max_pages + 1),
        )
