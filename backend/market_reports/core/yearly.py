"""Yearly Summary: earnings-and-sales-by-month history filtered to one calendar year.

Invariants:
    - Only history entries whose month falls in the requested year are kept
    - yearly is keyed by month number (1-12), ascending
    - totals are plain sums over the kept months (earnings rounded to cents)
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from market_reports.core.report_types import round_money
from market_reports.core.statement import parse_statement_date


@dataclass(frozen=True)
class MonthEarnings:
    sales: int = 0
    amount: float = 0.0


@dataclass(frozen=True)
class YearTotals:
    sales: int = 0
    earnings: float = 0.0


@dataclass(frozen=True)
class YearlyReport:
    yearly: dict[int, MonthEarnings] = field(default_factory=dict)
    totals: YearTotals = field(default_factory=YearTotals)


def yearly_cache_key(year: int) -> str:
    return f"envato.yearly.{int(year)}"


def filter_history_by_year(
    history: Iterable[Mapping[str, Any]], year: int,
) -> dict[int, MonthEarnings]:
    filtered: dict[int, MonthEarnings] = {}
    for entry in history:
        month = parse_statement_date(entry["month"])
        if month.year != int(year):
            continue
        filtered[month.month] = MonthEarnings(
            sales=int(entry.get("sales") or 0),
            amount=float(entry.get("earnings") or 0),
        )
    return dict(sorted(filtered.items()))


def build_yearly_report(history: Iterable[Mapping[str, Any]], year: int) -> YearlyReport:
    """Filter history to `year` and total it. Pure, no IO."""
    yearly = filter_history_by_year(history, year)
    return YearlyReport(
        yearly=yearly,
        totals=YearTotals(
            sales=sum(m.sales for m in yearly.values()),
            earnings=round_money(sum(m.amount for m in yearly.values())),
        ),
    )
