"""Report Filters: build envelopes and derive narrower views from wider ones.

Invariants:
    - Inputs are never mutated; each function returns a new ReportEnvelope
    - Range and item filters recompute aggregates from the filtered sales only
    - Item filtering refreshes monthly/totals but keeps the original items ranking
    - Truncation caps only the raw sales list; aggregates stay computed on full data
"""

from dataclasses import replace
from datetime import date

from market_reports.core.aggregate import (
    compute_daily_aggregate, compute_item_aggregate, compute_month_totals,
)
from market_reports.core.report_types import ReportEnvelope, SaleRecord


def build_envelope(sales: list[SaleRecord]) -> ReportEnvelope:
    """Aggregate net sales into a full ReportEnvelope."""
    if not sales:
        return ReportEnvelope()
    monthly = compute_daily_aggregate(sales)
    totals = compute_month_totals(monthly)
    return ReportEnvelope(
        sales=list(sales),
        monthly=monthly,
        totals=totals,
        items=compute_item_aggregate(sales, totals),
    )


def filter_by_range(envelope: ReportEnvelope, start: date, end: date) -> ReportEnvelope:
    """Keep sales dated within [start, end] and re-aggregate them."""
    return build_envelope([s for s in envelope.sales if start <= s.date <= end])


def filter_by_item(envelope: ReportEnvelope, item_id: int) -> ReportEnvelope:
    sales = [s for s in envelope.sales if s.item_id == int(item_id)]
    monthly = compute_daily_aggregate(sales)
    return replace(
        envelope, sales=sales, monthly=monthly, totals=compute_month_totals(monthly),
    )


def truncate_sales(envelope: ReportEnvelope, limit: int) -> ReportEnvelope:
    return replace(envelope, sales=envelope.sales[:limit])
