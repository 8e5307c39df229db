# -*- coding: utf-8 -*-
"""Async HTTP client with retries for the market backend."""

from __future__ import annotations

import asyncio
import random
import uuid
from typing import Any, Callable, Dict, Optional

import aiohttp
import structlog
from structlog.contextvars import bound_contextvars

from coral_markets_bot.config import Settings
from coral_markets_bot.exceptions import MarketApiError


class AsyncHttpClient:
    """GET-only JSON client with exponential backoff.

    Network errors, timeouts, 429 and 5xx responses are retried up to
    MARKET_API__MAX_RETRIES attempts. Other 4xx responses fail immediately.
    If no session is injected, one is created and must be closed via aclose()
    or by using the client as an async context manager.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.market_api.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _backoff_delay(self, attempt: int) -> float:
        """Exponential backoff with jitter, capped at 4 seconds."""
        base = min(4.0, 0.25 * (2**attempt))
        return base + random.uniform(0.0, 0.15)

    @staticmethod
    def _is_retryable(status: int) -> bool:
        return status == 429 or status >= 500

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """GET url and return the parsed JSON body.

        Raises:
            MarketApiError: On a non-retryable status, or once retries are exhausted.
                status_code is set when the backend answered.
        """
        params = params or {}
        max_retries = self._settings.market_api.max_retries
        last_error: Optional[Exception] = None
        last_status: Optional[int] = None

        with bound_contextvars(
            http_url=url,
            http_request_id=uuid.uuid4().hex[:12],
            http_max_retries=max_retries,
        ):
            for attempt in range(max_retries):
                with bound_contextvars(http_attempt=attempt + 1):
                    try:
                        session = await self._get_session()
                        async with session.get(url, params=params) as response:
                            if response.status < 400:
                                return await response.json(content_type=None)
                            last_status = response.status
                            if not self._is_retryable(response.status):
                                self._logger.warning("http_get_rejected", http_status_code=response.status)
                                raise MarketApiError(
                                    f"GET {url} returned status {response.status}",
                                    url=url,
                                    status_code=response.status,
                                )
                            self._logger.debug("http_get_retry", http_status_code=response.status)
                    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                        last_error = e
                        self._logger.debug(
                            "http_get_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                        )
                    if attempt + 1 < max_retries:
                        await asyncio.sleep(self._backoff_delay(attempt))

            self._logger.error(
                "http_get_failed",
                http_status_code=last_status,
                http_attempts=max_retries,
                error_type=type(last_error).__name__ if last_error else None,
                error_message=str(last_error) if last_error else None,
            )
            raise MarketApiError(
                f"GET failed after {max_retries} attempts: {url}",
                url=url,
                status_code=last_status,
                cause=last_error,
            ) from last_error
