"""Persistence layer.

Provides the aiosqlite connection pool, data models, and the read-only
OHLC store.
"""

from market_api.data.database import ConnectionPool
from market_api.data.models import BotRecord, BotView, OHLCBar
from market_api.data.ohlc_store import OHLCStore

__all__ = [
    "BotRecord",
    "BotView",
    "ConnectionPool",
    "OHLCBar",
    "OHLCStore",
]
