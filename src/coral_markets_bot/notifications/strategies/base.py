# -*- coding: utf-8 -*-
"""Base delivery strategy: the contract the fan-out dispatcher talks to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from coral_markets_bot.config.config import Settings


class BaseDeliveryStrategy(ABC):
    """Abstract chat-platform delivery.

    Every operation raises DeliveryError on failure; callers decide whether to
    log and continue or to surface it.
    """

    def __init__(self, settings: "Settings"):
        self.settings = settings

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """True between initialize() and shutdown()."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        pass

    @abstractmethod
    async def send_to_channel(self, channel_id: str, text: str) -> None:
        """Post a message to a channel."""
        pass

    @abstractmethod
    async def open_direct_channel(self, user_id: str) -> str:
        """Return the chat id used to message the user directly."""
        pass

    async def send_direct_message(self, user_id: str, text: str) -> None:
        """Open the user's direct channel, then send. Either step may raise DeliveryError."""
        chat_id = await self.open_direct_channel(user_id)
        await self.send_to_channel(chat_id, text)
