# -*- coding: utf-8 -*-
"""NotificationPolicy: pure logic deciding who receives a market notification.

No I/O. Cadence state (frequency tier, last update time) is supplied by the caller.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from coral_markets_bot.models.channel_config import FrequencyTier
from coral_markets_bot.models.market import Market
from coral_markets_bot.models.subscriber import Subscriber

CLOSING_SOON_WINDOW = timedelta(hours=6)
"""Markets with less time left than this are closing soon."""

CLOSING_SOON_INTERVAL = timedelta(minutes=15)
"""Minimum gap between updates for a closing-soon market, whatever the tier."""

FREQUENCY_INTERVALS: dict[str, timedelta] = {
    FrequencyTier.HIGH.value: timedelta(minutes=30),
    FrequencyTier.MEDIUM.value: timedelta(hours=1),
    FrequencyTier.LOW.value: timedelta(hours=3),
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NotificationPolicy:
    """Pure policy: user targeting, update cadence and category filtering."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or _utc_now

    def should_notify_user(self, subscriber: Subscriber, market: Market) -> bool:
        """Return True iff the user follows the market or its creator."""
        return market.id in subscriber.markets or market.creator in subscriber.creators

    @staticmethod
    def interval_for(frequency: str) -> timedelta:
        """Minimum update interval for a tier. Unknown tiers behave like medium."""
        return FREQUENCY_INTERVALS.get(
            str(frequency).lower(), FREQUENCY_INTERVALS[FrequencyTier.MEDIUM.value]
        )

    def is_closing_soon(self, market: Market, *, now: Optional[datetime] = None) -> bool:
        """True when the market has an end time less than CLOSING_SOON_WINDOW away."""
        if market.end_time is None:
            return False
        now = now or self._clock()
        return market.end_time - now < CLOSING_SOON_WINDOW

    def should_send_update(
        self,
        market: Market,
        frequency: str,
        last_update: datetime,
        *,
        now: Optional[datetime] = None,
    ) -> bool:
        """Decide whether a channel may receive another update for this market.

        Checks (in order):
        1. Market not active: never.
        2. Closing soon: at least CLOSING_SOON_INTERVAL since last_update.
        3. Otherwise: at least the tier interval since last_update.
        """
        if not market.is_active:
            return False
        now = now or self._clock()
        elapsed = now - last_update
        if self.is_closing_soon(market, now=now):
            return elapsed >= CLOSING_SOON_INTERVAL
        return elapsed >= self.interval_for(frequency)

    @staticmethod
    def category_allowed(allowed_categories: Iterable[str], category: str) -> bool:
        """Empty allowed set admits every category; otherwise exact membership."""
        allowed = frozenset(allowed_categories)
        if not allowed:
            return True
        return category in allowed
