"""Read-only access to stored OHLC bars."""

import aiosqlite
import structlog

from market_api.data.database import ConnectionPool, fits_sqlite_integer
from market_api.data.models import OHLCBar
from market_api.exceptions import StorageError
from market_api.logging import get_logger


class OHLCStore:
    """Typed query over the ``ohlc`` table.

    Usage:
        store = OHLCStore(pool)
        bars = await store.get_bars("bitflyer", "btcjpy", 60)
    """

    def __init__(
        self,
        pool: ConnectionPool,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._pool = pool
        self._log = logger or get_logger(__name__)

    async def get_bars(self, market: str, pair: str, periods: int) -> list[OHLCBar]:
        """Query all bars of one series.

        Returns list of OHLCBar ordered by unixtime ASC. An unknown series
        yields an empty list.
        """
        if not fits_sqlite_integer(periods):
            return []

        async with self._pool.acquire() as conn:
            try:
                cursor = await conn.execute(
                    "SELECT open, high, low, close, volume, unixtime "
                    "FROM ohlc WHERE market = ? AND pair = ? AND periods = ? "
                    "ORDER BY unixtime ASC",
                    (market, pair, periods),
                )
                rows = await cursor.fetchall()
            except aiosqlite.Error as exc:
                self._log.error(
                    "ohlc_query_failed",
                    market=market,
                    pair=pair,
                    periods=periods,
                    error=str(exc),
                )
                raise StorageError(str(exc)) from exc

        self._log.debug("ohlc_queried", market=market, pair=pair, periods=periods, count=len(rows))
        return [
            OHLCBar(
                open=float(row[0]),
                high=float(row[1]),
                low=float(row[2]),
                close=float(row[3]),
                volume=float(row[4]),
                unixtime=int(row[5]),
            )
            for row in rows
        ]
