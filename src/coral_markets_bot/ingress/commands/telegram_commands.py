# -*- coding: utf-8 -*-
"""Telegram slash commands for subscriptions and channel feed administration."""

from __future__ import annotations

import html
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

import structlog
from telegram import BotCommand, Update
from telegram.constants import ChatMemberStatus, ChatType, ParseMode
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes

from coral_markets_bot.exceptions import (
    MarketApiError,
    MarketNotFoundError,
    MissingRequiredConfigError,
)
from coral_markets_bot.services.subscriptions.subscription_service import VALID_FREQUENCIES

if TYPE_CHECKING:
    from coral_markets_bot.clients.market_api import MarketApiClient
    from coral_markets_bot.models.channel_config import ChannelConfig
    from coral_markets_bot.models.subscriber import Subscriber
    from coral_markets_bot.services.rendering.market_renderer import MarketMessageRenderer
    from coral_markets_bot.services.subscriptions.subscription_service import (
        SubscriptionService,
    )

CommandCallback = Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]

ADMIN_STATUSES = frozenset({ChatMemberStatus.OWNER, ChatMemberStatus.ADMINISTRATOR})

HELP_TEXT = (
    "<b>Coral Markets Bot Help</b>\n\n"
    "<b>User Commands:</b>\n"
    "- /subscribe_market &lt;market_id&gt; - Subscribe to notifications for a specific market\n"
    "- /unsubscribe_market &lt;market_id&gt; - Unsubscribe from notifications for a specific market\n"
    "- /subscribe_creator &lt;creator&gt; - Subscribe to notifications for a specific creator\n"
    "- /unsubscribe_creator &lt;creator&gt; - Unsubscribe from notifications for a specific creator\n"
    "- /list_subscriptions - List all your current subscriptions\n"
    "- /market &lt;market_id&gt; - Get information about a specific market\n"
    "- /help - Display this help message\n\n"
    "<b>Channel Admin Commands:</b>\n"
    "- /channel_feed_new_markets &lt;on/off&gt; - Enable or disable new market announcements\n"
    "- /channel_feed_categories &lt;categories&gt; - Set allowed categories (comma-separated)\n"
    "- /channel_feed_frequency &lt;low/medium/high&gt; - Set update frequency\n"
    "- /channel_settings - Display current channel settings\n\n"
    "You'll receive notifications for markets and creators you're subscribed to."
)


def _code(value: str) -> str:
    return f"<code>{html.escape(value)}</code>"


def format_subscriptions(subscriber: "Subscriber") -> str:
    if not subscriber.has_subscriptions:
        return "You have no subscriptions"
    lines = ["<b>Your Subscriptions:</b>", ""]
    if subscriber.markets:
        lines.append("<b>Markets:</b>")
        lines.extend(f"- {_code(m)}" for m in sorted(subscriber.markets))
        lines.append("")
    if subscriber.creators:
        lines.append("<b>Creators:</b>")
        lines.extend(f"- {_code(c)}" for c in sorted(subscriber.creators))
    return "\n".join(lines).rstrip()


def format_channel_settings(config: "ChannelConfig") -> str:
    categories = (
        html.escape(", ".join(sorted(config.allowed_categories)))
        if config.allowed_categories
        else "All categories"
    )
    last_update = (
        config.last_update.strftime("%Y-%m-%d %H:%M:%S") if config.has_been_updated else "Never"
    )
    return (
        "<b>Channel Settings</b>\n\n"
        f"New Market Announcements: {'Enabled' if config.feed_enabled else 'Disabled'}\n"
        f"Allowed Categories: {categories}\n"
        f"Update Frequency: {html.escape(config.frequency)}\n"
        f"Last Update: {last_update}"
    )


class TelegramCommandHandler:
    """Parses command arguments, checks chat-admin rights and delegates to SubscriptionService."""

    def __init__(
        self,
        subscription_service: "SubscriptionService",
        market_client: "MarketApiClient",
        renderer: "MarketMessageRenderer",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._service = subscription_service
        self._market_client = market_client
        self._renderer = renderer
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def commands(self) -> dict[str, tuple[str, CommandCallback]]:
        """Command name -> (menu description, callback)."""
        return {
            "subscribe_market": ("Subscribe to a market", self.subscribe_market),
            "unsubscribe_market": ("Unsubscribe from a market", self.unsubscribe_market),
            "subscribe_creator": ("Subscribe to a creator", self.subscribe_creator),
            "unsubscribe_creator": ("Unsubscribe from a creator", self.unsubscribe_creator),
            "list_subscriptions": ("List your subscriptions", self.list_subscriptions),
            "market": ("Show a market (e.g. /market 42)", self.market),
            "help": ("All commands", self.help),
            "channel_feed_new_markets": ("Admin: new market announcements on/off", self.channel_feed_new_markets),
            "channel_feed_categories": ("Admin: allowed categories (comma-separated)", self.channel_feed_categories),
            "channel_feed_frequency": ("Admin: update frequency low/medium/high", self.channel_feed_frequency),
            "channel_settings": ("Admin: show channel settings", self.channel_settings),
        }

    def bot_commands(self) -> list[BotCommand]:
        return [BotCommand(name, description) for name, (description, _) in self.commands().items()]

    def register_handlers(self, application: Application) -> None:
        for name, (_, callback) in self.commands().items():
            application.add_handler(CommandHandler(name, callback))
        self._logger.info("telegram_commands_registered", count=len(self.commands()))

    async def post_init(self, application: Application) -> None:
        """Publish the command menu (Application.builder().post_init hook)."""
        await application.bot.set_my_commands(self.bot_commands())

    # ---- helpers ----

    async def _reply(self, update: Update, text: str) -> None:
        message = update.effective_message
        if message is None:
            return
        await message.reply_text(text, parse_mode=ParseMode.HTML)

    @staticmethod
    def _user_id(update: Update) -> Optional[str]:
        user = update.effective_user
        return str(user.id) if user is not None else None

    @staticmethod
    def _chat_id(update: Update) -> Optional[str]:
        chat = update.effective_chat
        return str(chat.id) if chat is not None else None

    async def _single_arg(self, update: Update, context: ContextTypes.DEFAULT_TYPE, usage: str) -> Optional[str]:
        args = context.args or []
        if not args:
            await self._reply(update, f"Usage: {html.escape(usage)}")
            return None
        return " ".join(args).strip()

    async def _is_chat_admin(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> bool:
        """Private chats are always allowed; elsewhere the sender must be owner or administrator."""
        chat = update.effective_chat
        user = update.effective_user
        if chat is None or user is None:
            return False
        if chat.type == ChatType.PRIVATE:
            return True
        try:
            member = await context.bot.get_chat_member(chat_id=chat.id, user_id=user.id)
        except TelegramError as exc:
            self._logger.warning(
                "chat_member_lookup_failed",
                chat_id=chat.id,
                user_id=user.id,
                error_message=str(exc),
            )
            return False
        return member.status in ADMIN_STATUSES

    async def _require_admin(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> Optional[str]:
        """Return the chat id when the sender may administer it, else reply and return None."""
        if not await self._is_chat_admin(update, context):
            await self._reply(update, "Only chat administrators can change channel settings.")
            return None
        return self._chat_id(update)

    # ---- user commands ----

    async def subscribe_market(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user_id = self._user_id(update)
        market_id = await self._single_arg(update, context, "/subscribe_market <market_id>")
        if user_id is None or market_id is None:
            return
        await self._service.subscribe_market(user_id, market_id)
        await self._reply(update, f"You have been subscribed to market {_code(market_id)}")

    async def unsubscribe_market(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user_id = self._user_id(update)
        market_id = await self._single_arg(update, context, "/unsubscribe_market <market_id>")
        if user_id is None or market_id is None:
            return
        await self._service.unsubscribe_market(user_id, market_id)
        await self._reply(update, f"You have been unsubscribed from market {_code(market_id)}")

    async def subscribe_creator(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user_id = self._user_id(update)
        creator = await self._single_arg(update, context, "/subscribe_creator <creator>")
        if user_id is None or creator is None:
            return
        await self._service.subscribe_creator(user_id, creator)
        await self._reply(update, f"You have been subscribed to creator {_code(creator)}")

    async def unsubscribe_creator(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user_id = self._user_id(update)
        creator = await self._single_arg(update, context, "/unsubscribe_creator <creator>")
        if user_id is None or creator is None:
            return
        await self._service.unsubscribe_creator(user_id, creator)
        await self._reply(update, f"You have been unsubscribed from creator {_code(creator)}")

    async def list_subscriptions(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user_id = self._user_id(update)
        if user_id is None:
            return
        subscriber = await self._service.get_user_subscriptions(user_id)
        await self._reply(update, format_subscriptions(subscriber))

    async def market(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        market_id = await self._single_arg(update, context, "/market <market_id>")
        if market_id is None:
            return
        try:
            found = await self._market_client.fetch_market(market_id)
        except MissingRequiredConfigError:
            await self._reply(update, "Market lookups are not configured.")
            return
        except MarketNotFoundError:
            await self._reply(update, f"Market {_code(market_id)} not found.")
            return
        except MarketApiError as exc:
            self._logger.error("market_lookup_failed", market_id=market_id, error_message=str(exc))
            await self._reply(update, "Failed to retrieve market information")
            return
        await self._reply(update, self._renderer.render_announcement(found))

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._reply(update, HELP_TEXT)

    # ---- channel admin commands ----

    async def channel_feed_new_markets(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        channel_id = await self._require_admin(update, context)
        if channel_id is None:
            return
        setting = (context.args or [""])[0].strip().lower()
        if setting not in ("on", "off"):
            await self._reply(update, "Usage: /channel_feed_new_markets on|off")
            return
        await self._service.set_feed_enabled(channel_id, setting == "on")
        await self._reply(update, f"New market announcements have been turned {setting} for this channel")

    async def channel_feed_categories(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        channel_id = await self._require_admin(update, context)
        if channel_id is None:
            return
        raw = " ".join(context.args or [])
        config = await self._service.set_allowed_categories(channel_id, raw.split(","))
        shown = ", ".join(sorted(config.allowed_categories)) or "All categories"
        await self._reply(update, f"Allowed categories have been set to: {html.escape(shown)}")

    async def channel_feed_frequency(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        channel_id = await self._require_admin(update, context)
        if channel_id is None:
            return
        frequency = (context.args or [""])[0]
        try:
            config = await self._service.set_frequency(channel_id, frequency)
        except ValueError:
            await self._reply(update, f"Usage: /channel_feed_frequency {'|'.join(VALID_FREQUENCIES)}")
            return
        await self._reply(update, f"Update frequency has been set to: {config.frequency}")

    async def channel_settings(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        channel_id = await self._require_admin(update, context)
        if channel_id is None:
            return
        config = await self._service.get_channel_config(channel_id)
        await self._reply(update, format_channel_settings(config))
