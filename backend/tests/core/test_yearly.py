"""Yearly Summary: tests for year filtering and totals over monthly history."""

from market_reports.core.yearly import (
    MonthEarnings,
    YearTotals,
    build_yearly_report,
    yearly_cache_key,
)

HISTORY = [
    {"month": "Mon Dec 01 00:00:00 +1100 2025", "sales": "4", "earnings": "80.10"},
    {"month": "Sun Feb 01 00:00:00 +1100 2026", "sales": "3", "earnings": "45.25"},
    {"month": "Thu Jan 01 00:00:00 +1100 2026", "sales": "10", "earnings": "120.50"},
]


def test_only_requested_year_is_kept_in_month_order():
    report = build_yearly_report(HISTORY, 2026)
    assert list(report.yearly) == [1, 2]
    assert report.yearly[1] == MonthEarnings(sales=10, amount=120.5)


def test_totals_sum_kept_months():
    report = build_yearly_report(HISTORY, 2026)
    assert report.totals == YearTotals(sales=13, earnings=165.75)


def test_year_without_history_is_empty():
    report = build_yearly_report(HISTORY, 2019)
    assert report.yearly == {}
    assert report.totals == YearTotals()


def test_cache_key_per_year():
    assert yearly_cache_key(2026) == "envato.yearly.2026"
