# -*- coding: utf-8 -*-
"""Market: normalized shape of a prediction market carried by every inbound event.

Event payloads differ per kind; decoders in ingress.events map each of them into
this common shape. Fields a given event does not carry keep their defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class MarketStatus(str, Enum):
    """Market lifecycle state."""

    ACTIVE = "active"
    CLOSED = "closed"
    RESOLVED = "resolved"


class MarketEventKind(str, Enum):
    """Inbound event kinds. Values match the legacy webhook event_type strings."""

    NEW_MARKET = "new_market"
    MARKET_UPDATE = "market_update"
    TRADING_START = "trading_start"
    TRADING_END = "trading_end"
    MARKET_RESOLVED = "market_resolved"
    MARKET_BUY = "market_buy"


@dataclass(frozen=True, slots=True)
class Market:
    """A market as seen by the relay.

    percentages, when non-empty, is index-aligned with outcomes.
    """

    id: str
    title: str = ""
    description: str = ""
    outcomes: tuple[str, ...] = ()
    percentages: tuple[float, ...] = ()
    category: str = ""
    creator: str = ""
    volume: float = 0.0
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: MarketStatus = MarketStatus.ACTIVE
    resolved_outcome: Optional[str] = None
    """Set only when the market is resolved."""
    link: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == MarketStatus.ACTIVE

    def percentage_at(self, index: int) -> float:
        """Return the percentage for outcome index, or 0.0 when missing."""
        if 0 <= index < len(self.percentages):
            return self.percentages[index]
        return 0.0


@dataclass(frozen=True, slots=True)
class BuyDetails:
    """Transaction fields carried by a market_buy event."""

    amount: float
    outcome: str = ""
    buyer: str = ""
