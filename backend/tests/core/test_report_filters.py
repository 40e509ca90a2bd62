"""Report Filters and Snapshots: narrowing envelopes and surviving a JSON cache trip."""

import json
from datetime import date

from market_reports.core.envelope_snapshot import from_snapshot, to_snapshot
from market_reports.core.report_filters import (
    build_envelope,
    filter_by_item,
    filter_by_range,
    truncate_sales,
)
from market_reports.core.report_types import MonthTotals, ReportEnvelope, SaleRecord


def _sale(day, amount, item_id=1, order_id=None):
    return SaleRecord(
        date=date(2026, 3, day), day=day, order_id=order_id,
        item_id=item_id, amount=amount, item=f"Item {item_id}",
    )


def _march():
    return build_envelope([_sale(d, float(d), item_id=1 if d % 2 else 2, order_id=d)
                           for d in range(1, 32)])


def test_build_envelope_of_nothing_is_empty():
    assert build_envelope([]) == ReportEnvelope()


def test_range_filter_recomputes_aggregates():
    narrowed = filter_by_range(_march(), date(2026, 3, 5), date(2026, 3, 10))
    assert [s.day for s in narrowed.sales] == [5, 6, 7, 8, 9, 10]
    assert narrowed.totals == MonthTotals(sales=6, earnings=45.0)
    assert [d for d, t in narrowed.monthly.items() if t.sales] == [5, 6, 7, 8, 9, 10]
    assert len(narrowed.monthly) == 31
    assert sum(i.amount for i in narrowed.items) == 45.0


def test_range_filter_outside_data_is_empty():
    narrowed = filter_by_range(_march(), date(2026, 4, 1), date(2026, 4, 2))
    assert narrowed == ReportEnvelope()


def test_item_filter_keeps_full_ranking():
    envelope = _march()
    filtered = filter_by_item(envelope, 1)
    assert all(s.item_id == 1 for s in filtered.sales)
    assert filtered.totals.sales == 16
    assert filtered.items == envelope.items


def test_truncate_only_caps_sales_list():
    envelope = _march()
    truncated = truncate_sales(envelope, 10)
    assert len(truncated.sales) == 10
    assert truncated.totals == envelope.totals
    assert truncated.monthly == envelope.monthly


def test_snapshot_survives_json_encoding():
    envelope = _march()
    restored = from_snapshot(json.loads(json.dumps(to_snapshot(envelope))))
    assert restored == envelope
    assert all(isinstance(day, int) for day in restored.monthly)
