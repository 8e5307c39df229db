# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from typing import Optional

from dependency_injector import containers, providers
from telegram import Bot

from coral_markets_bot.clients.http import AsyncHttpClient
from coral_markets_bot.clients.market_api import MarketApiClient
from coral_markets_bot.config import Settings, get_settings
from coral_markets_bot.events.bus import get_event_bus
from coral_markets_bot.ingress.commands.telegram_commands import TelegramCommandHandler
from coral_markets_bot.ingress.web.app import create_app
from coral_markets_bot.ingress.web.server import WebServer
from coral_markets_bot.notifications.strategies.base import BaseDeliveryStrategy
from coral_markets_bot.notifications.strategies.console import ConsoleDelivery
from coral_markets_bot.notifications.strategies.telegram import TelegramDelivery, build_bot
from coral_markets_bot.persistence.repositories.in_memory import InMemorySubscriptionStore
from coral_markets_bot.services.dispatch.fanout_dispatcher import FanoutDispatcher
from coral_markets_bot.services.policy.notification_policy import NotificationPolicy
from coral_markets_bot.services.relay.market_event_relay import MarketEventRelay
from coral_markets_bot.services.rendering.market_renderer import MarketMessageRenderer
from coral_markets_bot.services.subscriptions.subscription_service import SubscriptionService


def _build_telegram_bot(settings: Settings) -> Optional[Bot]:
    """One Bot shared by delivery and command polling. None when Telegram is disabled."""
    if not settings.telegram.enabled:
        return None
    return build_bot(settings)


def _build_delivery(settings: Settings, bot: Optional[Bot]) -> BaseDeliveryStrategy:
    if bot is not None:
        return TelegramDelivery(settings=settings, bot=bot)
    return ConsoleDelivery(settings=settings)


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, store, policy, renderer, delivery, relay and ingress."""

    config = providers.Callable(get_settings)

    event_bus = providers.Callable(get_event_bus)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    market_api_client = providers.Singleton(
        MarketApiClient,
        settings=config,
        http_client=http_client,
    )

    subscription_store = providers.Singleton(InMemorySubscriptionStore)

    notification_policy = providers.Singleton(NotificationPolicy)

    message_renderer = providers.Singleton(MarketMessageRenderer)

    telegram_bot = providers.Singleton(_build_telegram_bot, config)

    delivery = providers.Singleton(_build_delivery, config, telegram_bot)

    fanout_dispatcher = providers.Singleton(
        FanoutDispatcher,
        store=subscription_store,
        policy=notification_policy,
        delivery=delivery,
    )

    subscription_service = providers.Singleton(
        SubscriptionService,
        store=subscription_store,
    )

    market_event_relay = providers.Singleton(
        MarketEventRelay,
        event_bus=event_bus,
        renderer=message_renderer,
        dispatcher=fanout_dispatcher,
    )

    command_handler = providers.Singleton(
        TelegramCommandHandler,
        subscription_service=subscription_service,
        market_client=market_api_client,
        renderer=message_renderer,
    )

    web_app = providers.Singleton(
        create_app,
        settings=config,
        subscription_service=subscription_service,
        event_bus=event_bus,
        renderer=message_renderer,
        dispatcher=fanout_dispatcher,
        delivery=delivery,
    )

    web_server = providers.Singleton(
        WebServer,
        settings=config,
        app=web_app,
    )
