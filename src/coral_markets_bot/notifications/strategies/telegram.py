# -*- coding: utf-8 -*-
"""Telegram delivery strategy (async). One attempt per message; failures raise DeliveryError."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog
from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.request import HTTPXRequest

from coral_markets_bot.exceptions import DeliveryError, MissingRequiredConfigError
from coral_markets_bot.notifications.strategies.base import BaseDeliveryStrategy

if TYPE_CHECKING:
    from coral_markets_bot.config.config import Settings


def build_bot(settings: "Settings") -> Bot:
    """Create a Bot with the configured HTTP timeouts.

    Raises:
        MissingRequiredConfigError: When TELEGRAM__BOT_TOKEN is not set.
    """
    cfg = settings.telegram
    if not cfg.bot_token:
        raise MissingRequiredConfigError("TELEGRAM__BOT_TOKEN is required when Telegram is enabled.")
    request = HTTPXRequest(
        connect_timeout=cfg.connect_timeout,
        read_timeout=cfg.read_timeout,
        write_timeout=cfg.write_timeout,
        pool_timeout=cfg.pool_timeout,
    )
    return Bot(token=str(cfg.bot_token), request=request)


class TelegramDelivery(BaseDeliveryStrategy):
    """Send messages with python-telegram-bot.

    A channel is a Telegram chat id. A user's direct channel is their private
    chat, resolved with get_chat(user_id).
    """

    def __init__(
        self,
        settings: "Settings",
        *,
        bot: Optional[Bot] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(settings)
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._bot: Optional[Bot] = bot
        self._owns_bot = bot is None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def bot(self) -> Optional[Bot]:
        return self._bot

    async def initialize(self) -> None:
        if self._running:
            self._logger.warning("telegram_already_running")
            return
        if self._bot is None:
            self._bot = build_bot(self.settings)
        await self._bot.initialize()
        self._running = True
        self._logger.info("telegram_delivery_started")

    async def shutdown(self) -> None:
        if not self._running:
            return
        if self._owns_bot and self._bot is not None:
            await self._bot.shutdown()
            self._bot = None
        self._running = False
        self._logger.info("telegram_delivery_stopped")

    def _require_bot(self, target: str, stage: str) -> Bot:
        if not self._running or self._bot is None:
            raise DeliveryError("Telegram delivery is not running", target=target, stage=stage)
        return self._bot

    async def send_to_channel(self, channel_id: str, text: str) -> None:
        bot = self._require_bot(channel_id, "send")
        try:
            await bot.send_message(
                chat_id=channel_id,
                text=text,
                parse_mode=ParseMode.HTML,
            )
        except TelegramError as exc:
            raise DeliveryError(
                f"Telegram rejected message to {channel_id}: {exc}",
                target=channel_id,
                stage="send",
                cause=exc,
            ) from exc

    async def open_direct_channel(self, user_id: str) -> str:
        bot = self._require_bot(user_id, "open_direct_channel")
        try:
            chat = await bot.get_chat(chat_id=user_id)
        except TelegramError as exc:
            raise DeliveryError(
                f"Cannot open direct chat with {user_id}: {exc}",
                target=user_id,
                stage="open_direct_channel",
                cause=exc,
            ) from exc
        return str(chat.id)
