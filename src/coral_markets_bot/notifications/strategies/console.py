# -*- coding: utf-8 -*-
"""Console delivery (print-based). Stands in for Telegram in local runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from coral_markets_bot.exceptions import DeliveryError
from coral_markets_bot.notifications.strategies.base import BaseDeliveryStrategy

if TYPE_CHECKING:  # pragma: no cover
    from coral_markets_bot.config.config import Settings


class ConsoleDelivery(BaseDeliveryStrategy):
    """Print every message to stdout, prefixed with its target."""

    def __init__(self, settings: "Settings") -> None:
        super().__init__(settings)
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        self._running = True

    async def shutdown(self) -> None:
        self._running = False

    async def send_to_channel(self, channel_id: str, text: str) -> None:
        if not self._running:
            raise DeliveryError("Console delivery is not running", target=channel_id)
        if not self.settings.console.enabled:
            return
        print(f"[{channel_id}]\n{text}\n")

    async def open_direct_channel(self, user_id: str) -> str:
        return f"dm:{user_id}"
