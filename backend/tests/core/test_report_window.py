"""Report Window: tests for date range resolution, cache keys and TTL choice.

Tests cover:
    - default window is the previous calendar month
    - year/month/day/to_day overrides
    - month_key only for partial ranges
    - calendar rollover for out-of-range days
    - TTL policy for current, full past and partial past windows
"""

from datetime import date, timedelta

from market_reports.core.report_window import (
    CURRENT_MONTH_TTL,
    PARTIAL_RANGE_TTL,
    choose_report_ttl,
    one_month_ttl,
    resolve_date_window,
    statement_cache_key,
)

TODAY = date(2026, 10, 18)


# ─── resolve_date_window ─────────────────────────────────────────

def test_default_window_is_previous_month():
    window = resolve_date_window(TODAY)
    assert window.start == date(2026, 9, 1)
    assert window.end == date(2026, 9, 30)
    assert window.is_current_month is False
    assert window.month_key is None
    assert window.range_key == "envato.statement.2026-09-01.2026-09-30"


def test_default_window_in_january_is_previous_december():
    window = resolve_date_window(date(2026, 1, 10))
    assert window.start == date(2025, 12, 1)
    assert window.end == date(2025, 12, 31)


def test_year_and_month_override_start_month():
    window = resolve_date_window(TODAY, year=2024, month=2)
    assert window.start == date(2024, 2, 1)
    assert window.end == date(2024, 2, 29)
    assert window.month_key is None


def test_day_range_sets_month_key_for_enclosing_month():
    window = resolve_date_window(TODAY, year=2026, month=3, day=5, to_day=10)
    assert window.start == date(2026, 3, 5)
    assert window.end == date(2026, 3, 10)
    assert window.range_key == statement_cache_key(date(2026, 3, 5), date(2026, 3, 10))
    assert window.month_key == statement_cache_key(date(2026, 3, 1), date(2026, 3, 31))


def test_to_day_alone_narrows_end_of_month():
    window = resolve_date_window(TODAY, month=9, to_day=15)
    assert window.start == date(2026, 9, 1)
    assert window.end == date(2026, 9, 15)
    assert window.month_key is not None


def test_zero_to_day_is_ignored():
    window = resolve_date_window(TODAY, month=9, to_day=0)
    assert window.end == date(2026, 9, 30)
    assert window.month_key is None


def test_current_month_flag_compares_year_and_month():
    assert resolve_date_window(TODAY, year=2026, month=10).is_current_month is True
    assert resolve_date_window(TODAY, year=2025, month=10).is_current_month is False


def test_day_overflow_rolls_into_next_month():
    window = resolve_date_window(TODAY, year=2026, month=2, day=31)
    assert window.start == date(2026, 3, 3)
    assert window.end == date(2026, 3, 31)


def test_identical_windows_share_keys_and_different_windows_do_not():
    a = resolve_date_window(TODAY, year=2026, month=3, day=5, to_day=10)
    b = resolve_date_window(TODAY, year=2026, month=3, day=5, to_day=10)
    c = resolve_date_window(TODAY, year=2026, month=3, day=5, to_day=11)
    assert a.range_key == b.range_key
    assert a.range_key != c.range_key


# ─── choose_report_ttl ───────────────────────────────────────────

def test_ttl_for_current_month_is_sixty_minutes():
    window = resolve_date_window(TODAY, year=2026, month=10, day=3, to_day=9)
    assert choose_report_ttl(window, TODAY) == CURRENT_MONTH_TTL == timedelta(minutes=60)


def test_ttl_for_full_past_month_is_one_month():
    window = resolve_date_window(TODAY, year=2026, month=9)
    assert choose_report_ttl(window, TODAY) == timedelta(days=31)
    assert one_month_ttl(date(2026, 2, 1)) == timedelta(days=28)


def test_ttl_for_partial_past_range_is_seven_days():
    window = resolve_date_window(TODAY, year=2026, month=9, day=5, to_day=10)
    assert choose_report_ttl(window, TODAY) == PARTIAL_RANGE_TTL == timedelta(days=7)
