"""Configuration subpackage."""

from coral_markets_bot.config.config import (
    AppSettings,
    ConsoleDeliverySettings,
    LoggingSettings,
    MarketApiSettings,
    Settings,
    TelegramSettings,
    WebServerSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "ConsoleDeliverySettings",
    "LoggingSettings",
    "MarketApiSettings",
    "Settings",
    "TelegramSettings",
    "WebServerSettings",
    "get_settings",
]
