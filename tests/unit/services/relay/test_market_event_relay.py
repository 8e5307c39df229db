# -*- coding: utf-8 -*-
"""Unit tests for MarketEventRelay."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, Mock

from coral_markets_bot.events.market_events import MarketEventReceived
from coral_markets_bot.models.channel_config import ChannelConfig
from coral_markets_bot.models.market import BuyDetails, MarketEventKind
from coral_markets_bot.models.subscriber import Subscriber
from coral_markets_bot.services.dispatch.fanout_dispatcher import DispatchReport
from coral_markets_bot.services.relay.market_event_relay import MarketEventRelay


class _FakeEventBus:
    """Minimal event bus fake for unit tests."""

    def __init__(self) -> None:
        self.handlers: dict[str, list[Any]] = {}

    def on(self, event_type: type[Any], handler: Any) -> None:
        key = event_type.__name__
        self.handlers.setdefault(key, []).append(handler)


class _TestableMarketEventRelay(MarketEventRelay):
    """Test wrapper exposing the bus handler."""

    async def on_market_event_public(self, event: MarketEventReceived) -> None:
        await self._on_market_event(event)


def test_start_and_stop_manage_subscription(renderer, dispatcher) -> None:
    bus = _FakeEventBus()
    relay = MarketEventRelay(bus, renderer, dispatcher)

    relay.start()
    assert len(bus.handlers["MarketEventReceived"]) == 1

    relay.stop()
    assert bus.handlers["MarketEventReceived"] == []


async def test_relay_renders_and_fans_out(renderer, dispatcher, store, delivery, market_factory) -> None:
    await store.save_channel_config(ChannelConfig.default("c1"))
    await store.save_subscriber(Subscriber.empty("u1").with_creator("alice"))
    relay = MarketEventRelay(_FakeEventBus(), renderer, dispatcher)
    market = market_factory()

    report = await relay.relay(MarketEventKind.NEW_MARKET, market)

    expected = renderer.render_announcement(market)
    assert delivery.channel_messages == [("c1", expected)]
    assert delivery.direct_messages == [("u1", expected)]
    assert report.channels_delivered == 1
    assert report.users_delivered == 1


async def test_only_market_update_is_cadence_gated(renderer, market_factory) -> None:
    dispatcher = Mock()
    dispatcher.dispatch = AsyncMock(return_value=DispatchReport())
    relay = MarketEventRelay(_FakeEventBus(), renderer, dispatcher)
    market = market_factory()

    await relay.relay(MarketEventKind.MARKET_UPDATE, market)
    await relay.relay(MarketEventKind.TRADING_END, market)
    await relay.relay(MarketEventKind.MARKET_BUY, market, BuyDetails(amount=5))

    gated = [call.kwargs["cadence_gated"] for call in dispatcher.dispatch.await_args_list]
    assert gated == [True, False, False]


async def test_handler_failure_is_logged_not_raised(renderer, market_factory) -> None:
    dispatcher = Mock()
    dispatcher.dispatch = AsyncMock(side_effect=RuntimeError("store down"))
    logger = Mock()
    relay = _TestableMarketEventRelay(
        _FakeEventBus(), renderer, dispatcher, get_logger=lambda _name: logger
    )
    event = MarketEventReceived(kind=MarketEventKind.NEW_MARKET, market=market_factory())

    await relay.on_market_event_public(event)

    logger.exception.assert_called_once()
    assert logger.exception.call_args.args[0] == "market_event_relay_failed"


async def test_relay_through_real_event_bus(
    event_bus, renderer, dispatcher, store, delivery, market_factory
) -> None:
    await store.save_channel_config(ChannelConfig.default("c1"))
    relay = MarketEventRelay(event_bus, renderer, dispatcher)
    relay.start()
    try:
        await event_bus.dispatch(
            MarketEventReceived(kind=MarketEventKind.TRADING_START, market=market_factory())
        )
    finally:
        relay.stop()
        await event_bus.stop()

    assert delivery.channels_sent == ["c1"]
