"""Boundary Protocols: contracts between the report builders and their collaborators.

Invariants:
    - Core NEVER imports infrastructure; implementations are injected by the shell
    - Cache values are JSON-safe (dicts, lists, str, numbers)

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no base class
    - Async methods: implementations do IO; the pure functions that consume
      their results stay synchronous
"""

from datetime import timedelta
from typing import Any, Protocol


class MarketApi(Protocol):
    """Upstream marketplace API: one authenticated call per invocation."""
    async def call(
        self, endpoint: str, params: dict[str, Any] | None = None,
        api_version: str = "v3",
    ) -> list[dict]: ...


class CacheStore(Protocol):
    """Key-value store with per-entry TTL."""
    async def has(self, key: str) -> bool: ...
    async def get(self, key: str) -> Any | None: ...
    async def put(self, key: str, value: Any, ttl: timedelta) -> None: ...
