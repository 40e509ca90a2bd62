"""Cache Stores: TTL key-value stores implementing core/report_protocols.CacheStore.

Invariants:
    - An entry is live while now < expires_at; expired entries read as missing
    - put() overwrites any existing value under the same key
    - Values are JSON-safe; InMemoryCacheStore deep-copies on read and write

Design Decisions:
    - DatabaseCacheStore deletes expired rows lazily on read (no sweeper task)
    - Clock injectable on both stores so tests can move time forward
"""

import copy
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import delete, select

from market_reports.core.errors import CacheStoreError
from market_reports.infrastructure.database import DatabaseSessionManager
from market_reports.models.cache_entry import CacheEntry

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class InMemoryCacheStore:
    """Process-local cache for development and tests."""

    def __init__(self, clock: Clock = _utcnow):
        self._entries: dict[str, tuple[Any, datetime]] = {}
        self._clock = clock

    async def has(self, key: str) -> bool:
        return self._live(key) is not None

    async def get(self, key: str) -> Any | None:
        entry = self._live(key)
        return copy.deepcopy(entry[0]) if entry else None

    async def put(self, key: str, value: Any, ttl: timedelta) -> None:
        self._entries[key] = (copy.deepcopy(value), self._clock() + ttl)

    async def health_check(self) -> bool:
        return True

    def _live(self, key: str) -> tuple[Any, datetime] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry[1]:
            del self._entries[key]
            return None
        return entry


class DatabaseCacheStore:
    """Cache backed by the cache_entries table."""

    def __init__(self, manager: DatabaseSessionManager, clock: Clock = _utcnow):
        self._manager = manager
        self._clock = clock

    async def has(self, key: str) -> bool:
        return await self.get(key) is not None

    async def get(self, key: str) -> Any | None:
        try:
            return await self._read(key)
        except CacheStoreError as e:
            e.context.cache_key = key
            raise

    async def put(self, key: str, value: Any, ttl: timedelta) -> None:
        try:
            await self._write(key, value, ttl)
        except CacheStoreError as e:
            e.context.cache_key = key
            raise

    async def health_check(self) -> bool:
        return await self._manager.health_check()

    async def _read(self, key: str) -> Any | None:
        async with self._manager.session() as db:
            result = await db.execute(
                select(CacheEntry).where(CacheEntry.key == key),
            )
            entry = result.scalar_one_or_none()
            if entry is None:
                return None
            if self._clock() >= _as_utc(entry.expires_at):
                await db.execute(delete(CacheEntry).where(CacheEntry.key == key))
                await db.commit()
                logger.debug("Expired cache entry removed", extra={"cache_key": key})
                return None
            return entry.value

    async def _write(self, key: str, value: Any, ttl: timedelta) -> None:
        async with self._manager.session() as db:
            await db.merge(CacheEntry(
                key=key,
                value=value,
                expires_at=self._clock() + ttl,
                created_at=self._clock(),
            ))
            await db.commit()


# Singleton (initialized on startup)
cache_store: InMemoryCacheStore | DatabaseCacheStore | None = None


def init_cache_store(
    backend: str, manager: DatabaseSessionManager | None = None,
) -> InMemoryCacheStore | DatabaseCacheStore:
    global cache_store
    if backend == "database":
        if manager is None:
            raise RuntimeError("Database cache backend requires an initialized database")
        cache_store = DatabaseCacheStore(manager)
    else:
        cache_store = InMemoryCacheStore()
    return cache_store
