"""Report Aggregation: tests for daily series, month totals and item ranking.

Tests cover:
    - zero-fill across the whole month, ascending day order
    - ceiling of month earnings
    - integer percentages with stable tie order
"""

from datetime import date

from market_reports.core.aggregate import (
    compute_daily_aggregate,
    compute_item_aggregate,
    compute_month_totals,
)
from market_reports.core.report_types import DayTotals, MonthTotals, SaleRecord


def _sale(day, amount, item_id=1, name="Item", month=9, order_id=None):
    return SaleRecord(
        date=date(2026, month, day), day=day, order_id=order_id,
        item_id=item_id, amount=amount, item=name,
    )


# ─── compute_daily_aggregate ─────────────────────────────────────

def test_daily_series_is_zero_filled_for_whole_month():
    daily = compute_daily_aggregate([_sale(3, 10.0), _sale(17, 5.0)])
    assert list(daily) == list(range(1, 31))
    assert daily[3] == DayTotals(amount=10.0, sales=1)
    assert daily[17] == DayTotals(amount=5.0, sales=1)
    assert daily[1] == DayTotals()


def test_daily_series_sorted_even_when_sales_arrive_out_of_order():
    daily = compute_daily_aggregate([_sale(20, 1.0), _sale(2, 1.0)])
    assert list(daily) == sorted(daily)


def test_daily_amounts_are_rounded_to_cents():
    daily = compute_daily_aggregate([_sale(4, 0.1), _sale(4, 0.2)])
    assert daily[4] == DayTotals(amount=0.3, sales=2)


def test_empty_sales_give_empty_series():
    assert compute_daily_aggregate([]) == {}


# ─── compute_month_totals ────────────────────────────────────────

def test_month_earnings_are_rounded_up():
    totals = compute_month_totals(compute_daily_aggregate([_sale(1, 10.25), _sale(2, 5.5)]))
    assert totals == MonthTotals(sales=2, earnings=16.0)


def test_month_totals_of_empty_series_are_zero():
    assert compute_month_totals({}) == MonthTotals(sales=0, earnings=0.0)


# ─── compute_item_aggregate ──────────────────────────────────────

def test_item_percentages_of_month_earnings():
    sales = [_sale(1, 25.0, item_id=2, name="B"), _sale(2, 75.0, item_id=1, name="A")]
    items = compute_item_aggregate(sales, MonthTotals(sales=2, earnings=100.0))
    assert [(i.envato_id, i.percentage) for i in items] == [(1, 75), (2, 25)]
    assert items[0].name == "A"
    assert items[0].amount == 75.0


def test_items_group_multiple_sales():
    sales = [_sale(1, 10.0, item_id=1), _sale(2, 10.0, item_id=1), _sale(3, 20.0, item_id=2)]
    items = compute_item_aggregate(sales, MonthTotals(sales=3, earnings=40.0))
    assert [(i.envato_id, i.sales, i.amount) for i in items] == [(1, 2, 20.0), (2, 1, 20.0)]


def test_equal_percentages_keep_encounter_order():
    sales = [_sale(1, 50.0, item_id=8, name="First"), _sale(1, 50.0, item_id=3, name="Second")]
    items = compute_item_aggregate(sales, MonthTotals(sales=2, earnings=100.0))
    assert [i.envato_id for i in items] == [8, 3]


def test_percentage_rounds_half_up():
    sales = [_sale(1, 12.5, item_id=1), _sale(2, 87.5, item_id=2)]
    items = compute_item_aggregate(sales, MonthTotals(sales=2, earnings=100.0))
    assert {i.envato_id: i.percentage for i in items} == {1: 13, 2: 88}


def test_zero_earnings_give_zero_percentage():
    items = compute_item_aggregate([_sale(1, 0.0)], MonthTotals(sales=1, earnings=0.0))
    assert items[0].percentage == 0
