"""Custom exceptions for the Coral Markets notification relay."""

from __future__ import annotations


class CoralBotError(Exception):
    """Base exception for relay errors."""

    pass


class MissingRequiredConfigError(CoralBotError):
    """Raised when a required configuration value is missing."""

    pass


class IdentifierGenerationError(CoralBotError):
    """Raised when a random identifier cannot be generated (entropy source failure)."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class DeliveryError(CoralBotError):
    """Raised when the chat platform rejects or fails a delivery.

    stage is one of: send, open_direct_channel.
    """

    def __init__(
        self,
        message: str,
        *,
        target: str,
        stage: str = "send",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.target = target
        self.stage = stage
        self.cause = cause


class MarketApiError(CoralBotError):
    """Raised when a market backend request fails after retries."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class MarketNotFoundError(MarketApiError):
    """Raised when the backend returns HTTP 404 for a market."""

    def __init__(self, market_id: str, *, url: str | None = None) -> None:
        super().__init__(f"Market not found: {market_id}", url=url, status_code=404)
        self.market_id = market_id
