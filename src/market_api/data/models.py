"""Data models for bot registrations and OHLC bars.

Booleans are stored as INTEGER 1/0 in SQLite and restored as bool on read.
``long_order``, ``short_order`` and ``operate_type`` take whatever default
the schema defines, which may be NULL.
"""

from dataclasses import asdict, dataclass


@dataclass
class BotRecord:
    """A full bot row, as returned once at creation time.

    ``token`` is the only copy the caller will ever see.
    """

    id: int
    name: str
    description: str
    enable: bool
    registered: int
    token: str
    long_order: bool | None
    short_order: bool | None
    operate_type: str | None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class BotView:
    """A bot row without ``id`` and ``token``, as served to token holders."""

    name: str
    description: str
    enable: bool
    registered: int
    long_order: bool | None
    short_order: bool | None
    operate_type: str | None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class OHLCBar:
    """A single OHLC bar for one (market, pair, periods) series."""

    open: float
    high: float
    low: float
    close: float
    volume: float
    unixtime: int

    def as_tuple(self) -> tuple[float, float, float, float, float, int]:
        return (self.open, self.high, self.low, self.close, self.volume, self.unixtime)


def to_optional_bool(value: int | None) -> bool | None:
    """Convert a stored 1/0 flag to bool, keeping NULL as None."""
    return None if value is None else bool(value)
