"""Telegram command ingress."""

from coral_markets_bot.ingress.commands.telegram_commands import TelegramCommandHandler

__all__ = ["TelegramCommandHandler"]
