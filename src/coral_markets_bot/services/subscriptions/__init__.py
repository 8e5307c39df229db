# -*- coding: utf-8 -*-
"""Subscription administration."""

from coral_markets_bot.services.subscriptions.subscription_service import (
    VALID_FREQUENCIES,
    SubscriptionService,
    normalize_frequency,
)

__all__ = ["VALID_FREQUENCIES", "SubscriptionService", "normalize_frequency"]
