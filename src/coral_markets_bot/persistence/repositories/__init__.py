# -*- coding: utf-8 -*-
"""Repositories: interfaces and implementations."""

from coral_markets_bot.persistence.repositories.in_memory import InMemorySubscriptionStore
from coral_markets_bot.persistence.repositories.interfaces import ISubscriptionStore

__all__ = ["ISubscriptionStore", "InMemorySubscriptionStore"]
