"""Market Reports API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ReportsError → structured JSON responses
    - Envato client, database (when used) and cache store initialized in lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from market_reports.api.error_handlers import register_error_handlers
from market_reports.api.routes import health, reports
from market_reports.config import get_settings
from market_reports.infrastructure.cache_store import init_cache_store
from market_reports.infrastructure.database import init_db
from market_reports.infrastructure.envato_client import (
    close_envato_client, init_envato_client,
)
from market_reports.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_envato_client(
        settings.envato_api_token,
        base_url=settings.envato_api_base_url,
        max_retries=settings.envato_max_retries,
        base_delay_ms=settings.envato_base_delay_ms,
        max_delay_ms=settings.envato_max_delay_ms,
        timeout_seconds=settings.envato_timeout_seconds,
    )
    manager = None
    if settings.cache_backend == "database":
        manager = init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
    init_cache_store(settings.cache_backend, manager)
    logger.info(f"Market Reports API started (cache: {settings.cache_backend})")
    yield
    await close_envato_client()
    if manager is not None:
        await manager.dispose()
    logger.info("Market Reports API shutting down")


app = FastAPI(
    title="Market Reports API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(reports.router)
