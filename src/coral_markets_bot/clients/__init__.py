"""HTTP and API clients."""

from coral_markets_bot.clients.http import AsyncHttpClient
from coral_markets_bot.clients.market_api import MarketApiClient

__all__ = ["AsyncHttpClient", "MarketApiClient"]
