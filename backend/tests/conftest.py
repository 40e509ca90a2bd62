"""Root conftest: shared fakes for report engine tests.

Invariants:
    - Tests never reach the real Envato API (FakeMarketApi serves fixed pages)
    - TODAY is fixed so window/TTL assertions are deterministic
"""

import os
from datetime import date, timedelta

os.environ.setdefault("ENVATO_API_TOKEN", "test-token")
os.environ.setdefault("CACHE_BACKEND", "memory")

import pytest  # noqa: E402

from market_reports.infrastructure.cache_store import InMemoryCacheStore  # noqa: E402
from market_reports.services.envato_reports import EnvatoReports  # noqa: E402

TODAY = date(2026, 10, 18)


class FakeMarketApi:
    """Serves statement pages and earnings history from memory, recording calls."""

    def __init__(self, pages=None, history=None, error=None, endless=False):
        self.pages = pages or []
        self.history = history or []
        self.error = error
        self.endless = endless
        self.calls: list[dict] = []

    async def call(self, endpoint, params=None, api_version="v3"):
        self.calls.append({
            "endpoint": endpoint,
            "params": dict(params or {}),
            "api_version": api_version,
        })
        if self.error is not None:
            raise self.error
        if endpoint.startswith("market/private/user/earnings-and-sales-by-month"):
            return list(self.history)
        if self.endless:
            return [self.pages[0][0]]
        page = (params or {}).get("page", 1)
        return list(self.pages[page - 1]) if page <= len(self.pages) else []


class RecordingCacheStore(InMemoryCacheStore):
    """In-memory store that remembers every put (key, ttl)."""

    def __init__(self):
        super().__init__()
        self.puts: list[tuple[str, timedelta]] = []

    async def put(self, key, value, ttl):
        self.puts.append((key, ttl))
        await super().put(key, value, ttl)


def _statement_row(
    day: date, order_id, item_id: int, amount: float,
    type: str = "Sale", detail: str | None = None,
) -> dict:
    return {
        "date": f"{day.isoformat()} 10:15:00 +1000",
        "order_id": order_id,
        "item_id": item_id,
        "amount": amount,
        "type": type,
        "detail": detail or f"Item {item_id} (Regular License)",
    }


@pytest.fixture
def statement_row():
    """Factory for raw upstream statement rows."""
    return _statement_row


@pytest.fixture
def cache():
    return RecordingCacheStore()


@pytest.fixture
def today():
    """Date the report clock reports as today."""
    return TODAY


@pytest.fixture
def make_reports(cache, today):
    """Build EnvatoReports around a FakeMarketApi and the recording cache."""
    def _make(api: FakeMarketApi, **kwargs) -> EnvatoReports:
        return EnvatoReports(api, cache, clock=lambda: today, **kwargs)
    return _make


@pytest.fixture
def fake_api_factory():
    return FakeMarketApi
