"""Report Aggregation: daily series, month totals and per-item ranking from net sales.

Invariants:
    - Daily series is ascending by day and zero-filled for every day of the month
      once at least one sale exists; empty input gives an empty series
    - Month earnings = ceil(unrounded sum of daily amounts)
    - Item percentages are integers (half-up); zero earnings give 0
    - Items sort by percentage descending; equal percentages keep encounter order
"""

import math
from calendar import monthrange
from collections.abc import Sequence

from market_reports.core.report_types import (
    DailyAggregate, DayTotals, ItemAggregate, MonthTotals, SaleRecord,
    round_money, round_whole,
)


def compute_daily_aggregate(sales: Sequence[SaleRecord]) -> DailyAggregate:
    """Sum amount and count per day of month, padded to the full month."""
    if not sales:
        return {}

    daily: dict[int, DayTotals] = {}
    for sale in sales:
        current = daily.get(sale.day, DayTotals())
        daily[sale.day] = DayTotals(
            amount=round_money(current.amount + sale.amount),
            sales=current.sales + 1,
        )

    first = sales[0].date
    days_in_month = monthrange(first.year, first.month)[1]
    if len(daily) < days_in_month:
        for day in range(1, days_in_month + 1):
            daily.setdefault(day, DayTotals())

    return dict(sorted(daily.items()))


def compute_month_totals(daily: DailyAggregate) -> MonthTotals:
    earnings = sum(totals.amount for totals in daily.values())
    sales = sum(totals.sales for totals in daily.values())
    return MonthTotals(sales=sales, earnings=float(math.ceil(earnings)))


def compute_item_aggregate(
    sales: Sequence[SaleRecord], totals: MonthTotals,
) -> list[ItemAggregate]:
    """Group sales by item and rank items by share of month earnings."""
    grouped: dict[int, ItemAggregate] = {}
    for sale in sales:
        current = grouped.get(sale.item_id)
        if current is None:
            grouped[sale.item_id] = ItemAggregate(
                envato_id=sale.item_id, name=sale.item,
                amount=round_money(sale.amount), sales=1,
            )
            continue
        grouped[sale.item_id] = ItemAggregate(
            envato_id=current.envato_id, name=current.name,
            amount=round_money(current.amount + sale.amount),
            sales=current.sales + 1,
        )

    ranked = [
        ItemAggregate(
            envato_id=item.envato_id, name=item.name,
            amount=item.amount, sales=item.sales,
            percentage=_percentage(item.amount, totals.earnings),
        )
        for item in grouped.values()
    ]
    # sorted() is stable: ties keep encounter order
    return sorted(ranked, key=lambda item: -item.percentage)


def _percentage(amount: float, earnings: float) -> int:
    if not earnings:
        return 0
    return round_whole(amount / earnings * 100)
