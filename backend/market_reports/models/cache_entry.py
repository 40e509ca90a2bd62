"""CacheEntry ORM: one cached report value with its expiry.

Invariants:
    - key is unique (primary key); put() overwrites
    - expires_at is stored in UTC; an entry is live while now < expires_at
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from market_reports.db.base import Base


class CacheEntry(Base):
    """Cached JSON value (report envelope snapshot or yearly history)."""
    __tablename__ = "cache_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
