# -*- coding: utf-8 -*-
"""Chat-platform delivery."""

from coral_markets_bot.notifications.strategies import (
    BaseDeliveryStrategy,
    ConsoleDelivery,
    TelegramDelivery,
)

__all__ = ["BaseDeliveryStrategy", "ConsoleDelivery", "TelegramDelivery"]
