# -*- coding: utf-8 -*-
"""Coral Markets backend client (market lookups for the /market command)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional
from urllib.parse import quote

import structlog

from coral_markets_bot.exceptions import (
    MarketApiError,
    MarketNotFoundError,
    MissingRequiredConfigError,
)
from coral_markets_bot.ingress.events.decoders import PayloadDecodeError, decode_market

if TYPE_CHECKING:
    from coral_markets_bot.clients.http import AsyncHttpClient
    from coral_markets_bot.config import Settings
    from coral_markets_bot.models.market import Market


class MarketApiClient:
    """Fetches markets from MARKET_API__BASE_URL via AsyncHttpClient."""

    def __init__(
        self,
        settings: "Settings",
        http_client: "AsyncHttpClient",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def configured(self) -> bool:
        return bool(self._settings.market_api.base_url)

    def _base_url(self) -> str:
        base_url = self._settings.market_api.base_url
        if not base_url:
            raise MissingRequiredConfigError("MARKET_API__BASE_URL is not configured.")
        return base_url.rstrip("/")

    async def fetch_market(self, market_id: str) -> "Market":
        """GET {base_url}/markets/{market_id}.

        Raises:
            MissingRequiredConfigError: No base URL configured.
            MarketNotFoundError: Backend answered 404.
            MarketApiError: Any other failure, including an undecodable body.
        """
        url = f"{self._base_url()}/markets/{quote(market_id, safe='')}"
        try:
            data = await self._http.get(url)
        except MarketApiError as e:
            if e.status_code == 404:
                raise MarketNotFoundError(market_id, url=url) from e
            raise
        try:
            market = decode_market(data)
        except PayloadDecodeError as e:
            raise MarketApiError(f"Invalid market payload from {url}", url=url, cause=e) from e
        self._logger.debug("market_fetched", market_id=market.id or market_id)
        return market
