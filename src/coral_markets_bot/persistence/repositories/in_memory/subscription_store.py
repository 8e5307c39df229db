# -*- coding: utf-8 -*-
"""In-memory subscription store (subscribers by user_id, channels by channel_id, webhooks by id)."""

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Callable, Optional

from coral_markets_bot.exceptions import IdentifierGenerationError
from coral_markets_bot.models.channel_config import ChannelConfig
from coral_markets_bot.models.subscriber import Subscriber
from coral_markets_bot.models.webhook_registration import WebhookRegistration
from coral_markets_bot.persistence.repositories.interfaces.subscription_store import (
    ISubscriptionStore,
)
from coral_markets_bot.utils.rwlock import AsyncReadWriteLock

WEBHOOK_ID_PREFIX = "wh_"


def generate_webhook_id() -> str:
    """Return "wh_" followed by 24 hex chars from 12 random bytes."""
    return WEBHOOK_ID_PREFIX + secrets.token_hex(12)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemorySubscriptionStore(ISubscriptionStore):
    """In-memory implementation of ISubscriptionStore.

    Each collection has its own readers-writer lock. Records are frozen, so the
    snapshots returned by list_* can be iterated while writers proceed.
    """

    def __init__(
        self,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            id_factory: Webhook id generator (default: generate_webhook_id).
            clock: Source of created_at timestamps (default: UTC now).
        """
        self._id_factory = id_factory or generate_webhook_id
        self._clock = clock or _utc_now
        self._subscribers: dict[str, Subscriber] = {}
        self._channels: dict[str, ChannelConfig] = {}
        self._webhooks: dict[str, WebhookRegistration] = {}
        self._subscribers_lock = AsyncReadWriteLock()
        self._channels_lock = AsyncReadWriteLock()
        self._webhooks_lock = AsyncReadWriteLock()

    async def get_subscriber(self, user_id: str) -> Subscriber:
        async with self._subscribers_lock.read():
            found = self._subscribers.get(user_id)
        return found if found is not None else Subscriber.empty(user_id)

    async def save_subscriber(self, subscriber: Subscriber) -> None:
        async with self._subscribers_lock.write():
            self._subscribers[subscriber.user_id] = subscriber

    async def delete_subscriber(self, user_id: str) -> None:
        async with self._subscribers_lock.write():
            self._subscribers.pop(user_id, None)

    async def list_subscribers(self) -> list[Subscriber]:
        async with self._subscribers_lock.read():
            return list(self._subscribers.values())

    async def get_channel_config(self, channel_id: str) -> ChannelConfig:
        async with self._channels_lock.read():
            found = self._channels.get(channel_id)
        return found if found is not None else ChannelConfig.default(channel_id)

    async def save_channel_config(self, config: ChannelConfig) -> None:
        async with self._channels_lock.write():
            self._channels[config.channel_id] = config

    async def list_channel_configs(self) -> list[ChannelConfig]:
        async with self._channels_lock.read():
            return list(self._channels.values())

    async def record_channel_update(self, channel_id: str, at: datetime) -> ChannelConfig:
        """Set last_update under a single write lock (no lost updates between get and save)."""
        async with self._channels_lock.write():
            current = self._channels.get(channel_id) or ChannelConfig.default(channel_id)
            updated = current.with_last_update(at)
            self._channels[channel_id] = updated
        return updated

    async def register_webhook(self, registration: WebhookRegistration) -> WebhookRegistration:
        try:
            registration_id = self._id_factory()
        except Exception as e:
            raise IdentifierGenerationError(
                f"Failed to generate webhook id: {e}", cause=e
            ) from e
        if not registration_id:
            raise IdentifierGenerationError("Webhook id generator returned an empty id")
        stored = registration.registered(registration_id, self._clock())
        async with self._webhooks_lock.write():
            self._webhooks[stored.id] = stored
        return stored

    async def unregister_webhook(self, registration_id: str) -> None:
        async with self._webhooks_lock.write():
            self._webhooks.pop(registration_id, None)

    async def get_webhook_registration(self, registration_id: str) -> Optional[WebhookRegistration]:
        async with self._webhooks_lock.read():
            return self._webhooks.get(registration_id)

    async def list_webhook_registrations(self) -> list[WebhookRegistration]:
        async with self._webhooks_lock.read():
            return list(self._webhooks.values())

    async def list_webhook_registrations_by_channel(self, channel_id: str) -> list[WebhookRegistration]:
        async with self._webhooks_lock.read():
            return [r for r in self._webhooks.values() if r.channel_id == channel_id]
