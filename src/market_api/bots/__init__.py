"""Bot registration and token-gated access."""

from market_api.bots.reader import BotReader
from market_api.bots.registrar import BotRegistrar, build_insert_statement
from market_api.bots.validator import validate_bot_fields

__all__ = [
    "BotReader",
    "BotRegistrar",
    "build_insert_statement",
    "validate_bot_fields",
]
