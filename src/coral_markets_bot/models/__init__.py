# -*- coding: utf-8 -*-
"""Domain models."""

from coral_markets_bot.models.channel_config import (
    NEVER_UPDATED,
    ChannelConfig,
    FrequencyTier,
)
from coral_markets_bot.models.market import (
    BuyDetails,
    Market,
    MarketEventKind,
    MarketStatus,
)
from coral_markets_bot.models.subscriber import Subscriber
from coral_markets_bot.models.webhook_registration import WebhookRegistration

__all__ = [
    "NEVER_UPDATED",
    "BuyDetails",
    "ChannelConfig",
    "FrequencyTier",
    "Market",
    "MarketEventKind",
    "MarketStatus",
    "Subscriber",
    "WebhookRegistration",
]
