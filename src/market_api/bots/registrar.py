"""Bot registration: validate, insert with a server-side token, read back.

The token is produced by SQLite's ``randomblob`` inside the INSERT itself,
so the application never holds a token for a row that did not commit.
"""

import time
from collections.abc import Callable
from typing import Any

import aiosqlite
import structlog

from market_api.bots.validator import OPTIONAL_FLAG_FIELDS, validate_bot_fields
from market_api.data.database import ConnectionPool
from market_api.data.models import BotRecord, to_optional_bool
from market_api.exceptions import StorageError
from market_api.logging import get_logger

TOKEN_BYTES = 32  # 64 hex characters

INSERTABLE_COLUMNS = frozenset(
    ("name", "description", "enable", "registered", *OPTIONAL_FLAG_FIELDS)
)

_SELECT_BOT_SQL = (
    "SELECT id, name, description, enable, registered, token, "
    "long_order, short_order, operate_type FROM bot WHERE id = ?"
)


def build_insert_statement(fields: dict[str, Any]) -> tuple[str, list[Any]]:
    """Build the INSERT for whichever columns ``fields`` carries.

    Column names and bound values are projected from a single ordered
    list of pairs, so they always line up. The ``token`` column is always
    appended and valued by SQLite.

    Raises:
        ValueError: if a key is not an insertable bot column.
    """
    pairs = list(fields.items())
    unknown = [name for name, _ in pairs if name not in INSERTABLE_COLUMNS]
    if unknown:
        raise ValueError(f"not an insertable bot column: {', '.join(unknown)}")

    columns = [name for name, _ in pairs]
    params = [value for _, value in pairs]
    placeholders = ["?"] * len(pairs)

    columns.append("token")
    placeholders.append(f"lower(hex(randomblob({TOKEN_BYTES})))")

    sql = f"INSERT INTO bot ({', '.join(columns)}) VALUES ({', '.join(placeholders)})"
    return sql, params


def row_to_bot_record(row: Any) -> BotRecord:
    """Map a row selected by ``_SELECT_BOT_SQL`` to a BotRecord."""
    return BotRecord(
        id=row[0],
        name=row[1],
        description=row[2],
        enable=bool(row[3]),
        registered=row[4],
        token=row[5],
        long_order=to_optional_bool(row[6]),
        short_order=to_optional_bool(row[7]),
        operate_type=row[8],
    )


class BotRegistrar:
    """Creates bot records atomically.

    Either a fully populated BotRecord (id and token set) is returned, or an
    exception is raised and no row exists.

    Usage:
        registrar = BotRegistrar(pool)
        record = await registrar.register({"name": "Bot1", "description": "test", "enable": True})
    """

    def __init__(
        self,
        pool: ConnectionPool,
        clock: Callable[[], float] = time.time,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._pool = pool
        self._clock = clock
        self._log = logger or get_logger(__name__)

    async def register(self, raw: Any) -> BotRecord:
        """Validate ``raw`` and persist a new bot.

        Raises:
            BotValidationError: payload rejected; no connection was taken.
            StorageError: insert, commit or read-back failed.
            PoolExhaustedError: no connection became free in time.
        """
        fields: dict[str, Any] = validate_bot_fields(raw)
        fields["registered"] = int(self._clock())
        sql, params = build_insert_statement(fields)

        async with self._pool.acquire() as conn:
            bot_id = await self._insert(conn, sql, params)
            record = await self._fetch(conn, bot_id)

        self._log.info(
            "bot_registered",
            bot_id=record.id,
            name=record.name,
            columns=list(fields),
        )
        return record

    async def _insert(self, conn: aiosqlite.Connection, sql: str, params: list[Any]) -> int:
        """Run the INSERT in its own transaction and return the new rowid."""
        try:
            await conn.execute("BEGIN")
            cursor = await conn.execute(sql, params)
            bot_id = cursor.lastrowid
            await conn.execute("COMMIT")
        except Exception as exc:
            # Binding errors (UnicodeEncodeError, OverflowError) are not
            # aiosqlite.Error but leave the transaction open all the same.
            await self._rollback(conn)
            self._log.error("bot_insert_failed", error=str(exc), error_type=type(exc).__name__)
            raise StorageError(str(exc)) from exc

        if bot_id is None:
            raise StorageError("insert did not report a row id")
        return bot_id

    async def _rollback(self, conn: aiosqlite.Connection) -> None:
        """Roll back if a transaction is open; a failing ROLLBACK is logged only."""
        if not conn.in_transaction:
            return
        try:
            await conn.execute("ROLLBACK")
        except aiosqlite.Error as exc:
            self._log.error("bot_rollback_failed", error=str(exc))

    async def _fetch(self, conn: aiosqlite.Connection, bot_id: int) -> BotRecord:
        try:
            cursor = await conn.execute(_SELECT_BOT_SQL, (bot_id,))
            row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            self._log.error("bot_readback_failed", bot_id=bot_id, error=str(exc))
            raise StorageError(str(exc)) from exc

        if row is None:
            self._log.error("bot_readback_missing", bot_id=bot_id)
            raise StorageError(f"bot {bot_id} missing after commit")
        return row_to_bot_record(row)
