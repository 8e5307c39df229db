"""In-memory repository implementations."""

from coral_markets_bot.persistence.repositories.in_memory.subscription_store import (
    InMemorySubscriptionStore,
    generate_webhook_id,
)

__all__ = ["InMemorySubscriptionStore", "generate_webhook_id"]
