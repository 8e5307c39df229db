# -*- coding: utf-8 -*-
"""Unit tests for TelegramCommandHandler."""

from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest
from telegram.constants import ChatMemberStatus, ParseMode
from telegram.error import TelegramError

from coral_markets_bot.exceptions import (
    MarketApiError,
    MarketNotFoundError,
    MissingRequiredConfigError,
)
from coral_markets_bot.ingress.commands.telegram_commands import (
    HELP_TEXT,
    TelegramCommandHandler,
    format_channel_settings,
    format_subscriptions,
)
from coral_markets_bot.models.channel_config import ChannelConfig
from coral_markets_bot.models.subscriber import Subscriber


def _update(*, user_id: int = 7, chat_id: int = -100, chat_type: str = "supergroup") -> Any:
    message = SimpleNamespace(reply_text=AsyncMock())
    return SimpleNamespace(
        effective_message=message,
        effective_user=SimpleNamespace(id=user_id),
        effective_chat=SimpleNamespace(id=chat_id, type=chat_type),
    )


def _context(*args: str, member_status: str = ChatMemberStatus.ADMINISTRATOR) -> Any:
    bot = SimpleNamespace(
        get_chat_member=AsyncMock(return_value=SimpleNamespace(status=member_status)),
    )
    return SimpleNamespace(args=list(args), bot=bot)


def _replies(update: Any) -> list[str]:
    return [call.args[0] for call in update.effective_message.reply_text.await_args_list]


@pytest.fixture
def market_client() -> Any:
    return SimpleNamespace(fetch_market=AsyncMock())


@pytest.fixture
def handler(subscription_service, market_client, renderer) -> TelegramCommandHandler:
    return TelegramCommandHandler(subscription_service, market_client, renderer)


async def test_subscribe_market_replies_and_stores(handler, store) -> None:
    update = _update()

    await handler.subscribe_market(update, _context("m1"))

    assert _replies(update) == ["You have been subscribed to market <code>m1</code>"]
    assert update.effective_message.reply_text.await_args.kwargs["parse_mode"] == ParseMode.HTML
    assert (await store.get_subscriber("7")).markets == frozenset({"m1"})


async def test_missing_argument_replies_usage(handler, store) -> None:
    update = _update()

    await handler.subscribe_creator(update, _context())

    assert _replies(update) == ["Usage: /subscribe_creator &lt;creator&gt;"]
    assert await store.list_subscribers() == []


async def test_unsubscribe_and_list(handler) -> None:
    update = _update()
    await handler.subscribe_market(update, _context("m1"))
    await handler.subscribe_creator(update, _context("alice"))
    await handler.unsubscribe_market(update, _context("m1"))

    await handler.list_subscriptions(update, _context())

    assert _replies(update)[-1] == (
        "<b>Your Subscriptions:</b>\n\n<b>Creators:</b>\n- <code>alice</code>"
    )


async def test_list_subscriptions_when_empty(handler) -> None:
    update = _update()

    await handler.list_subscriptions(update, _context())

    assert _replies(update) == ["You have no subscriptions"]


async def test_market_lookup_renders_announcement(handler, market_client, market_factory, renderer) -> None:
    market = market_factory()
    market_client.fetch_market.return_value = market
    update = _update()

    await handler.market(update, _context("m1"))

    market_client.fetch_market.assert_awaited_once_with("m1")
    assert _replies(update) == [renderer.render_announcement(market)]


@pytest.mark.parametrize(
    ("error", "reply"),
    [
        (MarketNotFoundError("m1"), "Market <code>m1</code> not found."),
        (MissingRequiredConfigError("no url"), "Market lookups are not configured."),
        (MarketApiError("boom", status_code=502), "Failed to retrieve market information"),
    ],
)
async def test_market_lookup_errors(handler, market_client, error, reply) -> None:
    market_client.fetch_market.side_effect = error
    update = _update()

    await handler.market(update, _context("m1"))

    assert _replies(update) == [reply]


async def test_help(handler) -> None:
    update = _update()

    await handler.help(update, _context())

    assert _replies(update) == [HELP_TEXT]


async def test_admin_commands_require_chat_admin(handler, store) -> None:
    update = _update()

    await handler.channel_feed_new_markets(update, _context("off", member_status=ChatMemberStatus.MEMBER))

    assert _replies(update) == ["Only chat administrators can change channel settings."]
    assert await store.list_channel_configs() == []


async def test_admin_check_failure_denies(handler) -> None:
    update = _update()
    context = _context("off")
    context.bot.get_chat_member.side_effect = TelegramError("chat not found")

    await handler.channel_feed_new_markets(update, context)

    assert _replies(update) == ["Only chat administrators can change channel settings."]


async def test_private_chat_skips_member_lookup(handler, store) -> None:
    update = _update(chat_id=7, chat_type="private")
    context = _context("off")

    await handler.channel_feed_new_markets(update, context)

    context.bot.get_chat_member.assert_not_awaited()
    assert (await store.get_channel_config("7")).feed_enabled is False


async def test_channel_feed_commands(handler, store) -> None:
    update = _update()

    await handler.channel_feed_new_markets(update, _context("off", member_status=ChatMemberStatus.OWNER))
    await handler.channel_feed_categories(update, _context("Sports,", "Weather"))
    await handler.channel_feed_frequency(update, _context("HIGH"))

    assert _replies(update) == [
        "New market announcements have been turned off for this channel",
        "Allowed categories have been set to: Sports, Weather",
        "Update frequency has been set to: high",
    ]
    config = await store.get_channel_config("-100")
    assert config.feed_enabled is False
    assert config.allowed_categories == frozenset({"Sports", "Weather"})
    assert config.frequency == "high"


async def test_invalid_feed_arguments_reply_usage(handler, store) -> None:
    update = _update()

    await handler.channel_feed_new_markets(update, _context("maybe"))
    await handler.channel_feed_frequency(update, _context("hourly"))

    assert _replies(update) == [
        "Usage: /channel_feed_new_markets on|off",
        "Usage: /channel_feed_frequency low|medium|high",
    ]
    assert await store.list_channel_configs() == []


async def test_channel_settings_reply(handler, store, now_utc: datetime) -> None:
    await store.record_channel_update("-100", now_utc)
    update = _update()

    await handler.channel_settings(update, _context())

    assert "Last Update: 2026-02-13 12:00:00" in _replies(update)[0]


def test_format_channel_settings_defaults() -> None:
    text = format_channel_settings(ChannelConfig.default("c1"))

    assert "New Market Announcements: Enabled" in text
    assert "Allowed Categories: All categories" in text
    assert "Update Frequency: medium" in text
    assert "Last Update: Never" in text


def test_format_subscriptions_escapes_values() -> None:
    text = format_subscriptions(Subscriber.empty("u1").with_market("<m1>"))

    assert "- <code>&lt;m1&gt;</code>" in text


async def test_register_handlers_and_menu(handler) -> None:
    application = Mock()
    application.bot = SimpleNamespace(set_my_commands=AsyncMock())

    handler.register_handlers(application)
    await handler.post_init(application)

    assert application.add_handler.call_count == len(handler.commands())
    published = application.bot.set_my_commands.await_args.args[0]
    assert [c.command for c in published] == list(handler.commands())
