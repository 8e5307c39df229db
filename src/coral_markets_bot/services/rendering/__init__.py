# -*- coding: utf-8 -*-
"""Message rendering."""

from coral_markets_bot.services.rendering.market_renderer import MarketMessageRenderer

__all__ = ["MarketMessageRenderer"]
