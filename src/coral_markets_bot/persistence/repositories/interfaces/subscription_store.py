# -*- coding: utf-8 -*-
"""Abstract interface for subscriber, channel and webhook storage (in-memory, DB, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from coral_markets_bot.models.channel_config import ChannelConfig
from coral_markets_bot.models.subscriber import Subscriber
from coral_markets_bot.models.webhook_registration import WebhookRegistration


class ISubscriptionStore(ABC):
    """Interface owning every Subscriber, ChannelConfig and WebhookRegistration."""

    @abstractmethod
    async def get_subscriber(self, user_id: str) -> Subscriber:
        """Return the subscriber, or an empty record if unknown. Never fails."""
        ...

    @abstractmethod
    async def save_subscriber(self, subscriber: Subscriber) -> None:
        """Insert or replace a subscriber (by user_id)."""
        ...

    @abstractmethod
    async def delete_subscriber(self, user_id: str) -> None:
        """Remove a subscriber. No-op when missing."""
        ...

    @abstractmethod
    async def list_subscribers(self) -> list[Subscriber]:
        """Return a snapshot of all subscribers."""
        ...

    @abstractmethod
    async def get_channel_config(self, channel_id: str) -> ChannelConfig:
        """Return the channel config, or the default config if unknown. Never fails."""
        ...

    @abstractmethod
    async def save_channel_config(self, config: ChannelConfig) -> None:
        """Insert or replace a channel config (by channel_id)."""
        ...

    @abstractmethod
    async def list_channel_configs(self) -> list[ChannelConfig]:
        """Return a snapshot of all channel configs."""
        ...

    async def record_channel_update(self, channel_id: str, at: datetime) -> ChannelConfig:
        """Set last_update on the channel config and save it. Default impl is get + save."""
        updated = (await self.get_channel_config(channel_id)).with_last_update(at)
        await self.save_channel_config(updated)
        return updated

    @abstractmethod
    async def register_webhook(self, registration: WebhookRegistration) -> WebhookRegistration:
        """Assign id and created_at, persist and return the stored registration.

        Raises:
            IdentifierGenerationError: When no id could be generated. Nothing is stored.
        """
        ...

    @abstractmethod
    async def unregister_webhook(self, registration_id: str) -> None:
        """Remove a registration. No-op when missing."""
        ...

    @abstractmethod
    async def get_webhook_registration(self, registration_id: str) -> Optional[WebhookRegistration]:
        """Return the registration by id, or None if missing."""
        ...

    @abstractmethod
    async def list_webhook_registrations(self) -> list[WebhookRegistration]:
        """Return a snapshot of all registrations."""
        ...

    async def list_webhook_registrations_by_channel(self, channel_id: str) -> list[WebhookRegistration]:
        """Return registrations for one channel. Default impl filters list_webhook_registrations."""
        return [r for r in await self.list_webhook_registrations() if r.channel_id == channel_id]
