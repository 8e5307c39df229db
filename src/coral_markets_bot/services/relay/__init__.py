# -*- coding: utf-8 -*-
"""Event relay (bus -> render -> dispatch)."""

from coral_markets_bot.services.relay.market_event_relay import MarketEventRelay

__all__ = ["MarketEventRelay"]
