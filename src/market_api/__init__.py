"""Market API.

HTTP service over one SQLite file: OHLC bar series and token-gated bot
registrations.
"""

__version__ = "0.1.0"
