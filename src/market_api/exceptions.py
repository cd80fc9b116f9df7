"""Custom exceptions for the market API.

Components raise these; the HTTP layer maps them to responses in
market_api.api.errors. Kept in one module to avoid circular imports
between the data, bots and api packages.
"""


class MarketApiError(Exception):
    """Base exception for all service errors."""


class BotValidationError(MarketApiError):
    """Raised when a bot creation payload fails validation.

    ``field`` names the first offending field, in validation order.
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"invalid or missing field: {field}")


class BotNotFoundError(MarketApiError):
    """Raised when no bot matches the requested id and token.

    Deliberately carries no detail on which of the two did not match.
    """

    def __init__(self) -> None:
        super().__init__("bot not found")


class StorageError(MarketApiError):
    """Raised when the database engine fails during insert, commit or read."""


class PoolExhaustedError(MarketApiError):
    """Raised when no pooled connection becomes free within the acquire timeout."""
