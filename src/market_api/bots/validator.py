"""Validation of bot creation payloads.

Rules are checked in a fixed order and the first failure wins, so a payload
missing both ``name`` and ``enable`` is rejected on ``name``.
"""

from collections.abc import Mapping
from typing import Any

from market_api.exceptions import BotValidationError

REQUIRED_TEXT_FIELDS = ("name", "description")
REQUIRED_FLAG_FIELDS = ("enable",)
OPTIONAL_FLAG_FIELDS = ("long_order", "short_order")


def _is_encodable(value: str) -> bool:
    """False for strings sqlite cannot store, e.g. lone surrogates from JSON escapes."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_bot_fields(raw: Any) -> dict[str, str | int]:
    """Check a raw payload and return the normalized field map.

    Required: ``name`` and ``description`` (non-empty, UTF-8 encodable str), ``enable`` (bool).
    Optional: ``long_order`` and ``short_order`` are kept only when they are
    bools; absent or wrongly typed values are dropped without error. Any
    other key is ignored. Flags are encoded as 1/0.

    The map is built in one fixed order: name, description, enable, then
    whichever optional flags were kept.

    Raises:
        BotValidationError: naming the first field that fails.
    """
    if not isinstance(raw, Mapping):
        raw = {}

    fields: dict[str, str | int] = {}

    for key in REQUIRED_TEXT_FIELDS:
        value = raw.get(key)
        if not isinstance(value, str) or len(value) < 1 or not _is_encodable(value):
            raise BotValidationError(key)
        fields[key] = value

    for key in REQUIRED_FLAG_FIELDS:
        value = raw.get(key)
        if not isinstance(value, bool):
            raise BotValidationError(key)
        fields[key] = int(value)

    for key in OPTIONAL_FLAG_FIELDS:
        value = raw.get(key)
        if isinstance(value, bool):
            fields[key] = int(value)

    return fields
