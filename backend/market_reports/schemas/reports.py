"""Report Schemas: response contracts for the Envato report endpoints.

Invariants:
    - Shapes mirror core/envelope_snapshot.py output one-to-one
    - Day and month keys serialize as JSON object keys (strings)
"""

import datetime as dt

from pydantic import BaseModel, Field


class SaleRecordOut(BaseModel):
    date: dt.date
    day: int = Field(ge=1, le=31)
    order_id: int | None = None
    item_id: int
    amount: float
    item: str
    type: str


class DayTotalsOut(BaseModel):
    amount: float
    sales: int


class MonthTotalsOut(BaseModel):
    sales: int
    earnings: float


class ItemAggregateOut(BaseModel):
    envato_id: int
    name: str
    amount: float
    sales: int
    percentage: int


class MonthlyReportResponse(BaseModel):
    """Monthly (or day-range) report envelope."""
    sales: list[SaleRecordOut]
    monthly: dict[int, DayTotalsOut]
    totals: MonthTotalsOut
    items: list[ItemAggregateOut]


class MonthEarningsOut(BaseModel):
    sales: int
    amount: float


class YearTotalsOut(BaseModel):
    sales: int
    earnings: float


class YearlyReportResponse(BaseModel):
    yearly: dict[int, MonthEarningsOut]
    totals: YearTotalsOut
