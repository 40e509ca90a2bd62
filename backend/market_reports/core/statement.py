"""Statement Normalizer: raw Envato statement rows to net-of-fee sale records.

Invariants:
    - Only "Sale" and "Author Fee" rows are kept; every other type is skipped silently
    - Rows sharing a non-null order_id merge (amounts summed) within their bucket
    - Rows without an order_id (older statements) are never merged
    - Author fees are subtracted from the sale with the same order_id and item_id,
      then discarded; the result holds sale records only
    - Net amounts are not clamped and may be negative

Design Decisions:
    - Two explicit reduction passes (merge by order, then fee netting) over a
      single mutable accumulator
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser

from market_reports.core.report_types import EntryType, SaleRecord, round_money

_BUCKET_BY_TYPE = {
    EntryType.SALE.value: "sales",
    EntryType.AUTHOR_FEE.value: "fees",
}


def parse_statement_date(value: Any) -> date:
    """Calendar date of an upstream timestamp, as reported (no timezone shift)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date_parser.parse(str(value)).date()


def _item_name(detail: Any) -> str:
    return str(detail or "").split("(", 1)[0].strip()


def _order_id(value: Any) -> int | None:
    if not value:
        return None
    return int(value) or None


def to_sale_record(entry: Mapping[str, Any]) -> SaleRecord:
    """Convert one raw statement row into a SaleRecord (absolute amount)."""
    entry_date = parse_statement_date(entry["date"])
    return SaleRecord(
        date=entry_date,
        day=entry_date.day,
        order_id=_order_id(entry.get("order_id")),
        item_id=int(entry.get("item_id") or 0),
        amount=round_money(abs(float(entry.get("amount") or 0))),
        item=_item_name(entry.get("detail")),
        type=str(entry.get("type")),
    )


def merge_by_order(records: Iterable[SaleRecord]) -> list[SaleRecord]:
    """Sum amounts of records sharing an order id, keeping first-seen order."""
    merged: list[SaleRecord] = []
    position_by_order: dict[int, int] = {}
    for record in records:
        if record.order_id is None:
            merged.append(record)
            continue
        position = position_by_order.get(record.order_id)
        if position is None:
            position_by_order[record.order_id] = len(merged)
            merged.append(record)
            continue
        existing = merged[position]
        merged[position] = replace(
            existing, amount=round_money(existing.amount + record.amount),
        )
    return merged


def net_author_fees(
    sales: Iterable[SaleRecord], fees: Iterable[SaleRecord],
) -> list[SaleRecord]:
    """Subtract matching author fees (same order_id and item_id) from sales."""
    fee_totals: dict[tuple[int, int], float] = {}
    for fee in fees:
        if fee.order_id is None:
            continue
        key = (fee.order_id, fee.item_id)
        fee_totals[key] = fee_totals.get(key, 0.0) + fee.amount

    netted: list[SaleRecord] = []
    for sale in sales:
        fee_amount = 0.0
        if sale.order_id is not None:
            fee_amount = fee_totals.get((sale.order_id, sale.item_id), 0.0)
        if fee_amount:
            sale = replace(sale, amount=round_money(sale.amount - fee_amount))
        netted.append(sale)
    return netted


def normalize_statement(entries: Iterable[Mapping[str, Any]]) -> list[SaleRecord]:
    """Turn raw statement rows into net sale records. Pure, never raises on unknown types."""
    buckets: dict[str, list[SaleRecord]] = {"sales": [], "fees": []}
    for entry in entries:
        bucket = _BUCKET_BY_TYPE.get(entry.get("type"))
        if bucket is None:
            continue
        buckets[bucket].append(to_sale_record(entry))

    return net_author_fees(
        merge_by_order(buckets["sales"]), merge_by_order(buckets["fees"]),
    )
