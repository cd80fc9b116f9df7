"""Bounded pool of async SQLite connections.

Uses aiosqlite so every blocking sqlite call runs on the connection's own
worker thread and never stalls the event loop. Connections are opened in
autocommit mode (``isolation_level=None``); callers that need atomicity
issue BEGIN/COMMIT/ROLLBACK themselves.
"""

import asyncio
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Self

import aiosqlite
import structlog

from market_api.exceptions import PoolExhaustedError, StorageError
from market_api.logging import get_logger

# Signed 64-bit range of an SQLite INTEGER
SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1


def fits_sqlite_integer(value: int) -> bool:
    """True if ``value`` can be bound as an SQLite INTEGER without OverflowError."""
    return SQLITE_INT_MIN <= value <= SQLITE_INT_MAX


class ConnectionPool:
    """Fixed-size pool of aiosqlite connections to one database file.

    The schema is expected to exist already; the pool only opens the file
    and configures pragmas.

    Usage:
        # Context manager (recommended)
        async with ConnectionPool("/path/to/market.db", size=4) as pool:
            async with pool.acquire() as conn:
                await conn.execute("SELECT ...")

        # Manual lifecycle
        pool = ConnectionPool("/path/to/market.db")
        await pool.open()
        try:
            ...
        finally:
            await pool.close()
    """

    def __init__(
        self,
        db_path: str,
        size: int = 8,
        acquire_timeout: float = 5.0,
        busy_timeout_ms: int = 5000,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        if size < 1:
            raise ValueError("pool size must be at least 1")
        self._db_path = db_path
        self._size = size
        self._acquire_timeout = acquire_timeout
        self._busy_timeout_ms = busy_timeout_ms
        self._log = logger or get_logger(__name__)
        self._connections: list[aiosqlite.Connection] = []
        self._idle: asyncio.Queue[aiosqlite.Connection] | None = None

    @property
    def size(self) -> int:
        return self._size

    @property
    def available(self) -> int:
        """Number of idle connections."""
        return self._idle.qsize() if self._idle is not None else 0

    async def open(self) -> None:
        """Open all connections and configure pragmas.

        Raises StorageError if the database file does not exist or cannot
        be opened; the file is never created here.
        """
        if not os.path.isfile(self._db_path):
            raise StorageError(f"database file not found: {self._db_path}")

        self._idle = asyncio.Queue(maxsize=self._size)
        try:
            for _ in range(self._size):
                conn = await aiosqlite.connect(self._db_path, isolation_level=None)
                self._connections.append(conn)
                await conn.execute(f"PRAGMA busy_timeout={int(self._busy_timeout_ms)}")
                await conn.execute("PRAGMA journal_mode=WAL")
                await conn.execute("PRAGMA synchronous=NORMAL")
                self._idle.put_nowait(conn)
        except aiosqlite.Error as exc:
            await self.close()
            raise StorageError(f"cannot open database {self._db_path}: {exc}") from exc

        self._log.info("connection_pool_opened", db_path=self._db_path, size=self._size)

    async def close(self) -> None:
        """Close every connection owned by the pool."""
        if not self._connections:
            return
        for conn in self._connections:
            await conn.close()
        self._connections = []
        self._idle = None
        self._log.info("connection_pool_closed", db_path=self._db_path)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection for the duration of the ``async with`` block.

        Waits up to ``acquire_timeout`` seconds for a free connection and
        raises PoolExhaustedError otherwise. A connection returned with an
        open transaction is rolled back before it goes back to the pool.
        """
        if self._idle is None:
            raise RuntimeError("Pool not open. Call open() first.")

        try:
            conn = await asyncio.wait_for(self._idle.get(), timeout=self._acquire_timeout)
        except asyncio.TimeoutError:
            self._log.warning(
                "pool_exhausted",
                size=self._size,
                timeout_s=self._acquire_timeout,
            )
            raise PoolExhaustedError(
                f"no database connection available within {self._acquire_timeout}s"
            ) from None

        try:
            yield conn
        finally:
            await self._release(conn)

    async def _release(self, conn: aiosqlite.Connection) -> None:
        try:
            if conn.in_transaction:
                self._log.warning("rollback_on_release")
                await conn.rollback()
        finally:
            if self._idle is not None:
                self._idle.put_nowait(conn)

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        """Async context manager exit."""
        await self.close()
