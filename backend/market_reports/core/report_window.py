"""Report Window: resolve loose year/month/day/to_day filters into a concrete date range.

Invariants:
    - Default window is the previous calendar month relative to `today`
    - The end date is the last day of the start month unless to_day overrides it
    - range_key is derived from the exact (start, end) pair; month_key from the
      full start month, and is None when both keys would be equal
    - Overflowing day/month overrides roll forward (Feb 31 -> Mar 3, month 13 -> Jan)

Design Decisions:
    - Cache keys embed ISO dates with a separator instead of concatenated timestamps
    - TTL selection lives here because it only depends on the window shape
"""

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

CACHE_KEY_PREFIX = "envato.statement"
CURRENT_MONTH_TTL = timedelta(minutes=60)
PARTIAL_RANGE_TTL = timedelta(days=7)


@dataclass(frozen=True)
class DateWindow:
    """Concrete statement window plus its cache identities."""
    start: date
    end: date
    is_current_month: bool
    range_key: str
    month_key: str | None = None


def statement_cache_key(start: date, end: date) -> str:
    return f"{CACHE_KEY_PREFIX}.{start.isoformat()}.{end.isoformat()}"


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def last_of_month(d: date) -> date:
    return d.replace(day=monthrange(d.year, d.month)[1])


def _rolled_date(year: int, month: int, day: int) -> date:
    """Build a date with calendar rollover for out-of-range months and days."""
    anchor = date(year, 1, 1) + relativedelta(months=month - 1)
    return anchor + timedelta(days=day - 1)


def resolve_date_window(
    today: date,
    year: int | None = None,
    month: int | None = None,
    day: int | None = None,
    to_day: int | None = None,
) -> DateWindow:
    """Resolve report filters into a DateWindow. Pure, no IO."""
    default_start = first_of_month(today) - relativedelta(months=1)
    start = _rolled_date(
        int(year) if year is not None else default_start.year,
        int(month) if month is not None else default_start.month,
        int(day) if day is not None else 1,
    )

    end = last_of_month(start)
    if to_day:
        end = _rolled_date(end.year, end.month, int(to_day))

    range_key = statement_cache_key(start, end)
    month_key = statement_cache_key(first_of_month(start), last_of_month(start))

    return DateWindow(
        start=start,
        end=end,
        is_current_month=(end.year, end.month) == (today.year, today.month),
        range_key=range_key,
        month_key=month_key if month_key != range_key else None,
    )


def choose_report_ttl(window: DateWindow, today: date) -> timedelta:
    """Cache lifetime for a freshly built monthly report.

    Current month: 60 minutes. Full past month: one calendar month from
    `today`. Partial past-month range: 7 days.
    """
    if window.is_current_month:
        return CURRENT_MONTH_TTL
    if window.month_key is None:
        return one_month_ttl(today)
    return PARTIAL_RANGE_TTL


def one_month_ttl(today: date) -> timedelta:
    """Time until the same day next month (28 to 31 days)."""
    return (today + relativedelta(months=1)) - today
