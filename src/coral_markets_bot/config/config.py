# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, WEB__API_KEY.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "coral-markets-bot"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/coral_markets_bot.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class TelegramSettings(BaseSettings):
    """Telegram bot (from env TELEGRAM__*). Used both for delivery and for commands."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False
    bot_token: Optional[str] = Field(default=None, description="Telegram bot token.")
    commands_enabled: bool = Field(
        default=True,
        description="Poll Telegram for slash commands when the bot is enabled.",
    )
    connect_timeout: float = Field(default=10.0, ge=0.1, le=60.0)
    read_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    write_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    pool_timeout: float = Field(default=10.0, ge=0.1, le=60.0)


class ConsoleDeliverySettings(BaseSettings):
    """Console delivery (prints messages instead of sending them). Used when Telegram is disabled."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True


class WebServerSettings(BaseSettings):
    """HTTP ingress (from env WEB__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    api_key: Optional[str] = Field(
        default=None,
        description="Shared secret expected in the X-API-Key header.",
    )
    token: Optional[str] = Field(
        default=None,
        description="Shared secret expected as Authorization: Bearer <token>.",
    )

    @property
    def auth_required(self) -> bool:
        return bool(self.api_key or self.token)


class MarketApiSettings(BaseSettings):
    """Coral Markets backend used by the /market command (from env MARKET_API__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    base_url: Optional[str] = Field(
        default=None,
        description="Market backend base URL, e.g. https://api.coralmarkets.example.",
    )
    timeout_seconds: float = Field(
        default=15.0,
        ge=1.0,
        le=120.0,
        description="HTTP request timeout in seconds.",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Maximum number of attempts for failed requests.",
    )


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, WEB__PORT.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    console: ConsoleDeliverySettings = Field(default_factory=ConsoleDeliverySettings)
    web: WebServerSettings = Field(default_factory=WebServerSettings)
    market_api: MarketApiSettings = Field(default_factory=MarketApiSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        e.g. from_env(web={"api_key": "secret"})
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from coral_markets_bot.config import get_settings

        settings = get_settings()
        port = settings.web.port
    """
    return Settings()
