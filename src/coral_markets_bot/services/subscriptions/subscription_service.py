# -*- coding: utf-8 -*-
"""SubscriptionService: administrative operations shared by HTTP and Telegram command ingress."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

import structlog

from coral_markets_bot.models.channel_config import ChannelConfig, FrequencyTier
from coral_markets_bot.models.subscriber import Subscriber
from coral_markets_bot.models.webhook_registration import WebhookRegistration

if TYPE_CHECKING:
    from coral_markets_bot.persistence.repositories.interfaces.subscription_store import (
        ISubscriptionStore,
    )

VALID_FREQUENCIES = tuple(tier.value for tier in FrequencyTier)


def normalize_frequency(frequency: str) -> str:
    """Lower-case and validate a frequency tier name.

    Raises:
        ValueError: When frequency is not one of low, medium, high.
    """
    value = str(frequency or "").strip().lower()
    if value not in VALID_FREQUENCIES:
        raise ValueError(
            f"Invalid frequency {frequency!r}; expected one of: {', '.join(VALID_FREQUENCIES)}"
        )
    return value


def normalize_categories(categories: Iterable[str]) -> frozenset[str]:
    """Strip category names and drop empty ones."""
    return frozenset(c.strip() for c in categories if c and c.strip())


class SubscriptionService:
    """Read-modify-write helpers over the subscription store.

    Subscribe/unsubscribe calls are idempotent; a call that changes nothing does not write.
    """

    def __init__(
        self,
        store: "ISubscriptionStore",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._store = store
        self._logger = get_logger(logger_name or self.__class__.__name__)

    # ---- user subscriptions ----

    async def subscribe_market(self, user_id: str, market_id: str) -> Subscriber:
        current = await self._store.get_subscriber(user_id)
        if market_id in current.markets:
            return current
        updated = current.with_market(market_id)
        await self._store.save_subscriber(updated)
        self._logger.info("market_subscribed", user_id=user_id, market_id=market_id)
        return updated

    async def unsubscribe_market(self, user_id: str, market_id: str) -> Subscriber:
        current = await self._store.get_subscriber(user_id)
        if market_id not in current.markets:
            return current
        updated = current.without_market(market_id)
        await self._store.save_subscriber(updated)
        self._logger.info("market_unsubscribed", user_id=user_id, market_id=market_id)
        return updated

    async def subscribe_creator(self, user_id: str, creator: str) -> Subscriber:
        current = await self._store.get_subscriber(user_id)
        if creator in current.creators:
            return current
        updated = current.with_creator(creator)
        await self._store.save_subscriber(updated)
        self._logger.info("creator_subscribed", user_id=user_id, creator=creator)
        return updated

    async def unsubscribe_creator(self, user_id: str, creator: str) -> Subscriber:
        current = await self._store.get_subscriber(user_id)
        if creator not in current.creators:
            return current
        updated = current.without_creator(creator)
        await self._store.save_subscriber(updated)
        self._logger.info("creator_unsubscribed", user_id=user_id, creator=creator)
        return updated

    async def get_user_subscriptions(self, user_id: str) -> Subscriber:
        return await self._store.get_subscriber(user_id)

    # ---- channel configuration ----

    async def get_channel_config(self, channel_id: str) -> ChannelConfig:
        return await self._store.get_channel_config(channel_id)

    async def set_feed_enabled(self, channel_id: str, enabled: bool) -> ChannelConfig:
        updated = (await self._store.get_channel_config(channel_id)).with_feed_enabled(enabled)
        await self._store.save_channel_config(updated)
        self._logger.info("channel_feed_updated", channel_id=channel_id, enabled=enabled)
        return updated

    async def set_allowed_categories(self, channel_id: str, categories: Iterable[str]) -> ChannelConfig:
        """Replace the allowed categories. An empty list allows every category."""
        allowed = normalize_categories(categories)
        updated = (await self._store.get_channel_config(channel_id)).with_allowed_categories(allowed)
        await self._store.save_channel_config(updated)
        self._logger.info(
            "channel_categories_updated",
            channel_id=channel_id,
            allowed_categories=sorted(allowed),
        )
        return updated

    async def set_frequency(self, channel_id: str, frequency: str) -> ChannelConfig:
        """Set the update cadence tier.

        Raises:
            ValueError: When frequency is not low, medium or high.
        """
        tier = normalize_frequency(frequency)
        updated = (await self._store.get_channel_config(channel_id)).with_frequency(tier)
        await self._store.save_channel_config(updated)
        self._logger.info("channel_frequency_updated", channel_id=channel_id, frequency=tier)
        return updated

    # ---- webhook registrations ----

    async def register_webhook(
        self,
        channel_id: str,
        webhook_url: str,
        *,
        events: Iterable[str] = (),
        frequency: str = "",
        allowed_categories: Iterable[str] = (),
    ) -> WebhookRegistration:
        """Store a webhook registration. An empty frequency defaults to medium.

        Raises:
            ValueError: When frequency is set but invalid.
            IdentifierGenerationError: When no id could be generated.
        """
        registration = WebhookRegistration(
            channel_id=channel_id,
            webhook_url=webhook_url,
            events=tuple(events),
            frequency=normalize_frequency(frequency) if frequency else "",
            allowed_categories=tuple(sorted(normalize_categories(allowed_categories))),
        )
        stored = await self._store.register_webhook(registration)
        self._logger.info(
            "webhook_registered",
            webhook_id=stored.id,
            channel_id=channel_id,
            events=list(stored.events),
        )
        return stored

    async def unregister_webhook(self, registration_id: str) -> None:
        await self._store.unregister_webhook(registration_id)
        self._logger.info("webhook_unregistered", webhook_id=registration_id)

    async def get_webhook(self, registration_id: str) -> Optional[WebhookRegistration]:
        return await self._store.get_webhook_registration(registration_id)

    async def list_webhooks(self, channel_id: Optional[str] = None) -> list[WebhookRegistration]:
        if channel_id:
            return await self._store.list_webhook_registrations_by_channel(channel_id)
        return await self._store.list_webhook_registrations()
