# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/."""

from coral_markets_bot.persistence.repositories.interfaces.subscription_store import (
    ISubscriptionStore,
)

__all__ = ["ISubscriptionStore"]
