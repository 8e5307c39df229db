"""Market lifecycle events published by Event Ingress."""

from __future__ import annotations

from typing import Optional

from bubus import BaseEvent  # type: ignore[import-untyped]

from coral_markets_bot.models.market import BuyDetails, Market, MarketEventKind


class MarketEventReceived(BaseEvent[None]):
    """Emitted once per decoded inbound market event.

    Handled by MarketEventRelay, which renders the message and fans it out.
    """

    kind: MarketEventKind
    market: Market
    buy: Optional[BuyDetails] = None
    """Set only for market_buy events."""
