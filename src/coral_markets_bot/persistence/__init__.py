"""Persistence layer (repositories, etc.)."""

from coral_markets_bot.persistence.repositories import (
    InMemorySubscriptionStore,
    ISubscriptionStore,
)

__all__ = ["ISubscriptionStore", "InMemorySubscriptionStore"]
