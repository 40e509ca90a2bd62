"""ORM Models.

All models imported here so Base.metadata is complete before create_all
or Alembic autogenerate runs.
"""

from market_reports.models.cache_entry import CacheEntry  # noqa: F401
