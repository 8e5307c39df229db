# -*- coding: utf-8 -*-
"""Request bodies and response shapes for the administrative HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from coral_markets_bot.ingress.events.schemas import Identifier
from coral_markets_bot.models.channel_config import ChannelConfig
from coral_markets_bot.models.subscriber import Subscriber


class _Request(BaseModel):
    model_config = ConfigDict(extra="ignore")


class MarketSubscriptionRequest(_Request):
    user_id: Identifier
    market_id: Identifier


class CreatorSubscriptionRequest(_Request):
    user_id: Identifier
    creator_id: str


class FeedToggleRequest(_Request):
    channel_id: Identifier
    enabled: bool


class CategoriesRequest(_Request):
    channel_id: Identifier
    allowed_categories: list[str] = Field(default_factory=list)


class FrequencyRequest(_Request):
    channel_id: Identifier
    frequency: str


class RegisterWebhookRequest(_Request):
    channel_id: Identifier
    webhook_url: str
    events: list[str] = Field(default_factory=list)
    frequency: str = ""
    allowed_categories: list[str] = Field(default_factory=list)


class UnregisterWebhookRequest(_Request):
    id: str = ""


def subscriber_to_dict(subscriber: Subscriber) -> dict[str, Any]:
    return {
        "user_id": subscriber.user_id,
        "markets": sorted(subscriber.markets),
        "creators": sorted(subscriber.creators),
    }


def channel_config_to_dict(config: ChannelConfig) -> dict[str, Any]:
    return {
        "channel_id": config.channel_id,
        "feed_enabled": config.feed_enabled,
        "allowed_categories": sorted(config.allowed_categories),
        "frequency": config.frequency,
        "last_update": config.last_update.isoformat() if config.has_been_updated else None,
    }
