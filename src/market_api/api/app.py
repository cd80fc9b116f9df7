"""FastAPI application factory.

The app owns the connection pool for its whole lifetime: the lifespan opens
it on startup, builds the registrar, reader and OHLC store on top of it, and
closes it on shutdown.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from market_api import __version__
from market_api.api.errors import register_exception_handlers
from market_api.api.middleware import AccessLogMiddleware
from market_api.api.routes import bots, ohlc
from market_api.bots.reader import BotReader
from market_api.bots.registrar import BotRegistrar
from market_api.config import AppSettings
from market_api.data.database import ConnectionPool
from market_api.data.ohlc_store import OHLCStore
from market_api.logging import get_logger


def create_app(settings: AppSettings) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Startup configuration. Read once; nothing reloads it.

    Returns:
        Configured FastAPI application. Components are available on
        ``app.state`` only while the lifespan is running.
    """
    logger = get_logger("market_api.app")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        pool = ConnectionPool(
            settings.database.path,
            size=settings.database.pool_size,
            acquire_timeout=settings.database.acquire_timeout,
            busy_timeout_ms=settings.database.busy_timeout_ms,
        )
        await pool.open()

        app.state.pool = pool
        app.state.registrar = BotRegistrar(pool)
        app.state.reader = BotReader(pool)
        app.state.ohlc_store = OHLCStore(pool)

        logger.info(
            "lifespan_started",
            db_path=settings.database.path,
            pool_size=settings.database.pool_size,
            strict_status_codes=settings.api.strict_status_codes,
        )
        try:
            yield
        finally:
            await pool.close()
            logger.info("lifespan_stopped")

    app = FastAPI(title="Market API", version=__version__, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(AccessLogMiddleware)
    register_exception_handlers(app, strict=settings.api.strict_status_codes)

    app.include_router(bots.router)
    app.include_router(ohlc.router)

    return app
