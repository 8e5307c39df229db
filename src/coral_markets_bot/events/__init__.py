# -*- coding: utf-8 -*-
"""Event bus and event types."""

from coral_markets_bot.events.bus import get_event_bus, set_event_bus
from coral_markets_bot.events.market_events import MarketEventReceived

__all__ = ["get_event_bus", "set_event_bus", "MarketEventReceived"]
