"""HTTP routers."""

from coral_markets_bot.ingress.web.routers import admin, events, health

__all__ = ["admin", "events", "health"]
