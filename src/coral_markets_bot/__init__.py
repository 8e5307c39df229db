"""Coral Markets notification relay: webhook events -> Telegram channels and direct messages."""

__version__ = "0.1.0"
