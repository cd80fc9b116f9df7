"""Shared test fixtures for the market API.

The service never creates schema, so every test database is provisioned
here with the tables the deployed database carries.
"""

import sqlite3
from pathlib import Path

import pytest
import pytest_asyncio

from market_api.config import ApiSettings, AppSettings, DatabaseSettings
from market_api.data.database import ConnectionPool

SCHEMA_SQL = """
CREATE TABLE bot (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL CHECK (length(name) <= 64),
    description TEXT NOT NULL,
    enable INTEGER NOT NULL,
    registered INTEGER NOT NULL,
    token TEXT NOT NULL UNIQUE,
    long_order INTEGER NOT NULL DEFAULT 0,
    short_order INTEGER NOT NULL DEFAULT 0,
    operate_type TEXT NOT NULL DEFAULT 'normal'
);

CREATE TABLE ohlc (
    market TEXT NOT NULL,
    pair TEXT NOT NULL,
    periods INTEGER NOT NULL,
    open REAL NOT NULL,
    high REAL NOT NULL,
    low REAL NOT NULL,
    close REAL NOT NULL,
    volume REAL NOT NULL,
    unixtime INTEGER NOT NULL,
    PRIMARY KEY (market, pair, periods, unixtime)
);
"""

OHLC_ROWS = [
    # market, pair, periods, open, high, low, close, volume, unixtime
    ("bitflyer", "btcjpy", 60, 101.0, 105.0, 99.5, 104.0, 12.5, 1600000120),
    ("bitflyer", "btcjpy", 60, 100.0, 102.0, 98.0, 101.0, 10.0, 1600000060),
    ("bitflyer", "btcjpy", 300, 90.0, 110.0, 85.0, 100.0, 55.0, 1600000300),
    ("bitflyer", "ethjpy", 60, 20.0, 21.0, 19.0, 20.5, 3.0, 1600000060),
    ("bitmex", "btcjpy", 60, 200.0, 201.0, 199.0, 200.0, 1.0, 1600000060),
]


def _count_rows(db_path: Path) -> int:
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute("SELECT COUNT(*) FROM bot").fetchone()[0]
    finally:
        conn.close()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Database file with the bot/ohlc schema and a few OHLC rows."""
    path = tmp_path / "market.db"
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.executemany(
            "INSERT INTO ohlc (market, pair, periods, open, high, low, close, volume, unixtime) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            OHLC_ROWS,
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest_asyncio.fixture
async def pool(db_path: Path):
    """Open two-connection pool on the test database."""
    async with ConnectionPool(str(db_path), size=2, acquire_timeout=1.0) as opened:
        yield opened


@pytest.fixture
def settings(db_path: Path) -> AppSettings:
    """AppSettings pointing at the test database, default status mapping."""
    return AppSettings(
        log_level="DEBUG",
        database=DatabaseSettings(path=str(db_path), pool_size=2, acquire_timeout=1.0),
        api=ApiSettings(strict_status_codes=False),
    )


@pytest.fixture
def count_bots(db_path: Path):
    """Count committed bot rows through an independent sqlite3 connection."""
    return lambda: _count_rows(db_path)
