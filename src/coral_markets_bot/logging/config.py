# -*- coding: utf-8 -*-
"""Logging configuration: structlog over stdlib handlers, optionally forwarded to Logfire."""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import logfire
import structlog
from structlog.types import EventDict, Processor

from coral_markets_bot.config import get_settings

if TYPE_CHECKING:
    from coral_markets_bot.config.config import AppSettings, LoggingSettings, Settings

LOG_LEVEL_TO_LOGFIRE: dict[str, str] = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "fatal",
}

# Chatty third-party loggers kept at WARNING unless the console runs at DEBUG.
NOISY_LOGGERS = ("httpx", "telegram.ext", "aiohttp.access")


def _service_context_processor(app_settings: "AppSettings") -> Processor:
    """Return a processor attaching logger name and service metadata to every event."""

    def _add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        stdlib_logger = getattr(logger, "_logger", None)
        event_dict["logger"] = (
            getattr(stdlib_logger, "name", None) or getattr(logger, "name", "") or ""
        )
        event_dict["app_name"] = app_settings.app_name
        if app_settings.service_name:
            event_dict["service_name"] = app_settings.service_name
        if app_settings.service_version:
            event_dict["service_version"] = app_settings.service_version
        event_dict["environment"] = app_settings.environment
        return event_dict

    return _add_service_context


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def _build_handlers(logging_settings: "LoggingSettings") -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if logging_settings.log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(_level(logging_settings.console_level))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)

    if logging_settings.log_to_file:
        log_file_path = Path(logging_settings.log_file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_file_path,
            when=logging_settings.log_file_when,
            interval=logging_settings.log_file_interval,
            backupCount=logging_settings.log_file_backup_count,
            encoding="utf-8",
            utc=logging_settings.log_file_utc,
        )
        file_handler.setLevel(_level(logging_settings.file_level))
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)
    return handlers


def configure_logging(settings: Optional["Settings"] = None) -> None:
    """Configure stdlib handlers, Logfire (if enabled) and the structlog processor chain."""
    settings = settings or get_settings()
    app_settings = settings.app
    logging_settings = settings.logging

    handlers = _build_handlers(logging_settings)
    if handlers:
        root_level = min(h.level for h in handlers)
        logging.basicConfig(level=root_level, handlers=handlers, force=True)
        if root_level > logging.DEBUG:
            for name in NOISY_LOGGERS:
                logging.getLogger(name).setLevel(max(root_level, logging.WARNING))

    if logging_settings.logfire_enabled:
        logfire.configure(
            token=logging_settings.logfire_token,
            service_name=app_settings.service_name or app_settings.app_name,
            service_version=app_settings.service_version,
            min_level=LOG_LEVEL_TO_LOGFIRE.get(logging_settings.logfire_level, "info"),  # type: ignore[arg-type]
            environment=app_settings.environment,
        )

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _service_context_processor(app_settings),
    ]
    if logging_settings.logfire_enabled:
        processors.append(logfire.StructlogProcessor())  # type: ignore[arg-type]

    # File output is always JSON; console follows json_format.
    if handlers:
        use_json = logging_settings.log_to_file or logging_settings.json_format
        renderer: Any = (
            structlog.processors.JSONRenderer()
            if use_json
            else structlog.dev.ConsoleRenderer()
        )
        processors.append(renderer)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
