"""Exceptions subpackage."""

from coral_markets_bot.exceptions.exceptions import (
    CoralBotError,
    DeliveryError,
    IdentifierGenerationError,
    MarketApiError,
    MarketNotFoundError,
    MissingRequiredConfigError,
)

__all__ = [
    "CoralBotError",
    "DeliveryError",
    "IdentifierGenerationError",
    "MarketApiError",
    "MarketNotFoundError",
    "MissingRequiredConfigError",
]
