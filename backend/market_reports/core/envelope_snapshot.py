"""Envelope Snapshot: serialization / deserialization for ReportEnvelope and YearlyReport.

Invariants:
    - to_snapshot produces a JSON-safe dict (ISO dates, no dataclasses)
    - from_snapshot accepts snapshots whose day keys went through JSON (str keys)
    - from_snapshot(to_snapshot(e)) == e

Design Decisions:
    - Same snapshot shape is used for cache values and HTTP responses
"""

from dataclasses import asdict
from datetime import date
from typing import Any

from market_reports.core.report_types import (
    DayTotals, ItemAggregate, MonthTotals, ReportEnvelope, SaleRecord,
)
from market_reports.core.yearly import YearlyReport


def _sale_to_dict(sale: SaleRecord) -> dict:
    data = asdict(sale)
    data["date"] = sale.date.isoformat()
    return data


def _sale_from_dict(data: dict) -> SaleRecord:
    return SaleRecord(
        date=date.fromisoformat(data["date"]),
        day=int(data["day"]),
        order_id=data.get("order_id"),
        item_id=int(data["item_id"]),
        amount=float(data["amount"]),
        item=data.get("item", ""),
        type=data.get("type", "Sale"),
    )


def to_snapshot(envelope: ReportEnvelope) -> dict:
    """Serialize a ReportEnvelope to a JSON-safe dict."""
    return {
        "sales": [_sale_to_dict(s) for s in envelope.sales],
        "monthly": {day: asdict(t) for day, t in envelope.monthly.items()},
        "totals": asdict(envelope.totals),
        "items": [asdict(i) for i in envelope.items],
    }


def from_snapshot(data: dict[str, Any]) -> ReportEnvelope:
    """Rebuild a ReportEnvelope from a snapshot dict."""
    monthly = {
        int(day): DayTotals(amount=float(t["amount"]), sales=int(t["sales"]))
        for day, t in (data.get("monthly") or {}).items()
    }
    totals = data.get("totals") or {}
    return ReportEnvelope(
        sales=[_sale_from_dict(s) for s in data.get("sales") or []],
        monthly=dict(sorted(monthly.items())),
        totals=MonthTotals(
            sales=int(totals.get("sales", 0)),
            earnings=float(totals.get("earnings", 0.0)),
        ),
        items=[ItemAggregate(**i) for i in data.get("items") or []],
    )


def yearly_to_snapshot(report: YearlyReport) -> dict:
    return {
        "yearly": {month: asdict(m) for month, m in report.yearly.items()},
        "totals": asdict(report.totals),
    }
