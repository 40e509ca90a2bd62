"""Database Infrastructure: SQLAlchemy Base for the cache table."""
