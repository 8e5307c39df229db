"""HTTP ingress (FastAPI)."""

from coral_markets_bot.ingress.web.app import create_app
from coral_markets_bot.ingress.web.server import WebServer

__all__ = ["WebServer", "create_app"]
