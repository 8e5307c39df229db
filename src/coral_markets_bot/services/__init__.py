# -*- coding: utf-8 -*-
"""Application services."""

from coral_markets_bot.services.dispatch import DispatchReport, FanoutDispatcher
from coral_markets_bot.services.policy import NotificationPolicy
from coral_markets_bot.services.relay import MarketEventRelay
from coral_markets_bot.services.rendering import MarketMessageRenderer
from coral_markets_bot.services.subscriptions import SubscriptionService

__all__ = [
    "DispatchReport",
    "FanoutDispatcher",
    "MarketEventRelay",
    "MarketMessageRenderer",
    "NotificationPolicy",
    "SubscriptionService",
]
