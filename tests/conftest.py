# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from bubus import EventBus  # type: ignore[import-untyped]

from coral_markets_bot.config import Settings
from coral_markets_bot.exceptions import DeliveryError
from coral_markets_bot.models.market import Market, MarketStatus
from coral_markets_bot.persistence.repositories.in_memory import InMemorySubscriptionStore
from coral_markets_bot.services.dispatch.fanout_dispatcher import FanoutDispatcher
from coral_markets_bot.services.policy.notification_policy import NotificationPolicy
from coral_markets_bot.services.rendering.market_renderer import MarketMessageRenderer
from coral_markets_bot.services.subscriptions.subscription_service import SubscriptionService


class FakeDelivery:
    """Recording delivery collaborator. Targets in fail_channels / fail_users raise DeliveryError."""

    def __init__(self) -> None:
        self.channel_messages: list[tuple[str, str]] = []
        self.direct_messages: list[tuple[str, str]] = []
        self.fail_channels: set[str] = set()
        self.fail_open_users: set[str] = set()
        self.fail_send_users: set[str] = set()
        self.running = True

    @property
    def is_running(self) -> bool:
        return self.running

    async def initialize(self) -> None:
        self.running = True

    async def shutdown(self) -> None:
        self.running = False

    async def send_to_channel(self, channel_id: str, text: str) -> None:
        if channel_id in self.fail_channels:
            raise DeliveryError("channel unavailable", target=channel_id)
        self.channel_messages.append((channel_id, text))

    async def open_direct_channel(self, user_id: str) -> str:
        if user_id in self.fail_open_users:
            raise DeliveryError("cannot open dm", target=user_id, stage="open_direct_channel")
        return f"dm:{user_id}"

    async def send_direct_message(self, user_id: str, text: str) -> None:
        await self.open_direct_channel(user_id)
        if user_id in self.fail_send_users:
            raise DeliveryError("dm rejected", target=user_id)
        self.direct_messages.append((user_id, text))

    @property
    def channels_sent(self) -> list[str]:
        return [channel for channel, _ in self.channel_messages]

    @property
    def users_sent(self) -> list[str]:
        return [user for user, _ in self.direct_messages]


@pytest.fixture
def now_utc() -> datetime:
    """Stable UTC timestamp for deterministic assertions."""
    return datetime(2026, 2, 13, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now_utc: datetime) -> Callable[[], datetime]:
    return lambda: now_utc


@pytest.fixture
def market_factory(now_utc: datetime) -> Callable[..., Market]:
    """Build an active two-outcome Market ending in two days, with easy overrides."""

    def _build(**overrides: Any) -> Market:
        defaults: dict[str, Any] = {
            "id": "m1",
            "title": "Will it rain tomorrow?",
            "description": "Resolves YES if it rains.",
            "outcomes": ("Yes", "No"),
            "percentages": (60.0, 40.0),
            "category": "Weather",
            "creator": "alice",
            "volume": 1234.5,
            "start_time": now_utc - timedelta(days=1),
            "end_time": now_utc + timedelta(days=2),
            "status": MarketStatus.ACTIVE,
            "link": "https://coral.markets/market/m1",
        }
        defaults.update(overrides)
        return Market(**defaults)

    return _build


@pytest.fixture
def store() -> InMemorySubscriptionStore:
    """Fresh in-memory subscription store per test."""
    return InMemorySubscriptionStore()


@pytest.fixture
def policy(clock: Callable[[], datetime]) -> NotificationPolicy:
    return NotificationPolicy(clock=clock)


@pytest.fixture
def renderer(clock: Callable[[], datetime]) -> MarketMessageRenderer:
    return MarketMessageRenderer(clock=clock)


@pytest.fixture
def delivery() -> FakeDelivery:
    return FakeDelivery()


@pytest.fixture
def dispatcher(
    store: InMemorySubscriptionStore,
    policy: NotificationPolicy,
    delivery: FakeDelivery,
    clock: Callable[[], datetime],
) -> FanoutDispatcher:
    return FanoutDispatcher(store, policy, delivery, clock=clock)  # type: ignore[arg-type]


@pytest.fixture
def subscription_service(store: InMemorySubscriptionStore) -> SubscriptionService:
    return SubscriptionService(store)


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build Settings from explicit section overrides, e.g. settings_factory(web={"api_key": "k"})."""

    def _build(**overrides: Any) -> Settings:
        return Settings.from_env(**overrides)

    return _build


@pytest.fixture
def event_bus() -> EventBus:
    """Isolated event bus instance for tests."""
    return EventBus(
        name="CoralMarketsBotTests",
        max_history_size=200,
        wal_path=None,
    )
