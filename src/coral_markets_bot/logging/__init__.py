"""Logging setup."""

from coral_markets_bot.logging.config import configure_logging

__all__ = ["configure_logging"]
