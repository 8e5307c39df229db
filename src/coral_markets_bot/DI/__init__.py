"""Dependency injection."""

from coral_markets_bot.DI.container import Container

__all__ = ["Container"]
