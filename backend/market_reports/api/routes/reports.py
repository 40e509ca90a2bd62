"""Envato Report Routes: yearly and monthly earnings endpoints.

Invariants:
    - Query parameters validated by FastAPI/pydantic before reaching the service
    - EnvatoReports is built per request from the process singletons
"""

import logging

from fastapi import APIRouter, Depends, Query

from market_reports.config import get_settings
from market_reports.core.envelope_snapshot import to_snapshot, yearly_to_snapshot
from market_reports.infrastructure import cache_store as cache_module
from market_reports.infrastructure import envato_client as client_module
from market_reports.schemas.reports import MonthlyReportResponse, YearlyReportResponse
from market_reports.services.envato_reports import EnvatoReports

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/reports/envato", tags=["reports"])


def get_envato_reports() -> EnvatoReports:
    """FastAPI dependency wiring the report service to its collaborators."""
    if client_module.envato_client is None or cache_module.cache_store is None:
        raise RuntimeError("Envato client or cache store not initialized")
    settings = get_settings()
    return EnvatoReports(
        client_module.envato_client,
        cache_module.cache_store,
        max_pages=settings.statement_max_pages,
        display_limit=settings.sales_display_limit,
    )


@router.get("/yearly", response_model=YearlyReportResponse)
async def yearly_earnings(
    year: int | None = Query(None, ge=2000, le=9999),
    reports: EnvatoReports = Depends(get_envato_reports),
):
    """Earnings and sales per month for one calendar year."""
    report = await reports.get_yearly_earnings(year)
    return yearly_to_snapshot(report)


@router.get("/monthly", response_model=MonthlyReportResponse)
async def monthly_earnings(
    year: int | None = Query(None, ge=2000, le=9999),
    month: int | None = Query(None, ge=1, le=12),
    day: int | None = Query(None, ge=1, le=31),
    to_day: int | None = Query(None, ge=1, le=31),
    envato_item_id: int | None = Query(None, ge=1),
    reports: EnvatoReports = Depends(get_envato_reports),
):
    """Monthly report; `day`/`to_day` narrow it to a day range, `envato_item_id` to one item."""
    envelope = await reports.get_monthly_earnings(
        year=year, month=month, day=day, to_day=to_day,
        envato_item_id=envato_item_id,
    )
    return to_snapshot(envelope)
