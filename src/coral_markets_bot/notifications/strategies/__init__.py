"""Delivery strategies."""

from coral_markets_bot.notifications.strategies.base import BaseDeliveryStrategy
from coral_markets_bot.notifications.strategies.console import ConsoleDelivery
from coral_markets_bot.notifications.strategies.telegram import TelegramDelivery, build_bot

__all__ = ["BaseDeliveryStrategy", "ConsoleDelivery", "TelegramDelivery", "build_bot"]
