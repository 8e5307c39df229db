# -*- coding: utf-8 -*-
"""
Entry point for the Coral Markets notification relay.

Orchestrates: logging, settings, container, delivery, event relay, HTTP ingress,
Telegram command polling and shutdown (SIGINT/SIGTERM or CancelledError).
Events flow: HTTP ingress -> event bus -> MarketEventRelay -> renderer -> FanoutDispatcher -> delivery.

Run with: python -m coral_markets_bot.main
"""
from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING, Any, Optional

import structlog
from telegram.ext import Application

from coral_markets_bot.DI import Container
from coral_markets_bot.config import get_settings
from coral_markets_bot.logging.config import configure_logging

if TYPE_CHECKING:
    from telegram import Bot

    from coral_markets_bot.ingress.commands.telegram_commands import TelegramCommandHandler


def _setup_signals(shutdown_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown_event.set)
        except NotImplementedError:
            pass  # Windows has no add_signal_handler


def _build_command_application(bot: "Bot", handler: "TelegramCommandHandler") -> Application:
    application = Application.builder().bot(bot).post_init(handler.post_init).build()
    handler.register_handlers(application)
    return application


async def _start_command_polling(application: Application, logger: Any) -> None:
    await application.initialize()
    if application.post_init is not None:
        await application.post_init(application)
    await application.start()
    if application.updater is not None:
        await application.updater.start_polling()
    logger.info("telegram_command_polling_started")


async def _stop_command_polling(application: Application, logger: Any) -> None:
    if application.updater is not None and application.updater.running:
        await application.updater.stop()
    if application.running:
        await application.stop()
    await application.shutdown()
    logger.info("telegram_command_polling_stopped")


async def run() -> None:
    configure_logging()
    logger = structlog.get_logger("main")
    settings = get_settings()

    container = Container()
    delivery = container.delivery()
    relay = container.market_event_relay()
    http_client = container.http_client()
    event_bus = container.event_bus()
    web_server = container.web_server() if settings.web.enabled else None

    await delivery.initialize()
    relay.start()

    application: Optional[Application] = None
    bot = container.telegram_bot()
    if bot is not None and settings.telegram.commands_enabled:
        application = _build_command_application(bot, container.command_handler())

    shutdown_event = asyncio.Event()
    _setup_signals(shutdown_event)

    try:
        if web_server is not None:
            await web_server.start()
        if application is not None:
            await _start_command_polling(application, logger)
        logger.info(
            "main_started",
            delivery=type(delivery).__name__,
            web_enabled=web_server is not None,
            commands_enabled=application is not None,
        )
        try:
            await shutdown_event.wait()
        except asyncio.CancelledError:
            logger.info("main_cancelled")
            raise
    finally:
        if application is not None:
            await _stop_command_polling(application, logger)
        if web_server is not None:
            await web_server.stop()
        relay.stop()
        await event_bus.stop()
        await http_client.aclose()
        await delivery.shutdown()
        logger.info("main_shutdown_complete")


def main() -> None:
    asyncio.run(run())


__all__ = ["run", "main"]

if __name__ == "__main__":
    main()
