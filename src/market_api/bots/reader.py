"""Token-gated reads of bot records."""

import aiosqlite
import structlog

from market_api.data.database import ConnectionPool, fits_sqlite_integer
from market_api.data.models import BotView, to_optional_bool
from market_api.exceptions import BotNotFoundError, StorageError
from market_api.logging import get_logger

# id and token are both part of the predicate: a wrong token and an
# unknown id are the same empty result.
_SELECT_VIEW_SQL = (
    "SELECT name, description, enable, registered, long_order, short_order, operate_type "
    "FROM bot WHERE id = ? AND token = ?"
)


class BotReader:
    """Serves a bot only to the holder of its token."""

    def __init__(
        self,
        pool: ConnectionPool,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._pool = pool
        self._log = logger or get_logger(__name__)

    async def get(self, bot_id: int, token: str) -> BotView:
        """Return the bot ``bot_id`` if ``token`` matches the stored one.

        An empty token is queried like any other and matches nothing.

        Raises:
            BotNotFoundError: no row with this id and token.
            StorageError: the query itself failed.
        """
        if not fits_sqlite_integer(bot_id):
            # No stored row can carry this id
            self._log.info("bot_not_found", bot_id=bot_id)
            raise BotNotFoundError()

        async with self._pool.acquire() as conn:
            try:
                cursor = await conn.execute(_SELECT_VIEW_SQL, (bot_id, token))
                row = await cursor.fetchone()
            except aiosqlite.Error as exc:
                self._log.error("bot_read_failed", bot_id=bot_id, error=str(exc))
                raise StorageError(str(exc)) from exc

        if row is None:
            self._log.info("bot_not_found", bot_id=bot_id)
            raise BotNotFoundError()

        return BotView(
            name=row[0],
            description=row[1],
            enable=bool(row[2]),
            registered=row[3],
            long_order=to_optional_bool(row[4]),
            short_order=to_optional_bool(row[5]),
            operate_type=row[6],
        )
