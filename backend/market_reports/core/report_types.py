"""Report Types: value objects shared by normalizer, aggregator and report builders.

Invariants:
    - Records are frozen; every transformation returns new objects
    - Money amounts are floats rounded to 2 decimals (half-up, see round_money)
    - DailyAggregate keys are day-of-month ints, ascending

Design Decisions:
    - Dataclasses over pydantic in core: no validation cost on hot aggregation paths;
      pydantic stays at the HTTP boundary (schemas/)
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

_CENTS = Decimal("0.01")


class EntryType(str, Enum):
    """Statement row types the normalizer understands."""
    SALE = "Sale"
    AUTHOR_FEE = "Author Fee"


def round_money(value: float) -> float:
    """Round to 2 decimals, half away from zero."""
    return float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def round_whole(value: float) -> int:
    """Round to the nearest integer, half away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class SaleRecord:
    """One normalized sale (or author fee) for an order."""
    date: date
    day: int
    order_id: int | None
    item_id: int
    amount: float
    item: str
    type: str = EntryType.SALE.value


@dataclass(frozen=True)
class DayTotals:
    amount: float = 0.0
    sales: int = 0


@dataclass(frozen=True)
class MonthTotals:
    sales: int = 0
    earnings: float = 0.0


@dataclass(frozen=True)
class ItemAggregate:
    envato_id: int
    name: str
    amount: float
    sales: int
    percentage: int = 0


DailyAggregate = dict[int, DayTotals]


@dataclass(frozen=True)
class ReportEnvelope:
    """Cached unit for a monthly report: raw sales plus derived aggregates."""
    sales: list[SaleRecord] = field(default_factory=list)
    monthly: DailyAggregate = field(default_factory=dict)
    totals: MonthTotals = field(default_factory=MonthTotals)
    items: list[ItemAggregate] = field(default_factory=list)
