# -*- coding: utf-8 -*-
"""FanoutDispatcher: delivers one rendered message to every eligible channel and user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog

from coral_markets_bot.exceptions import DeliveryError

if TYPE_CHECKING:
    from coral_markets_bot.models.market import Market
    from coral_markets_bot.notifications.strategies.base import BaseDeliveryStrategy
    from coral_markets_bot.persistence.repositories.interfaces.subscription_store import (
        ISubscriptionStore,
    )
    from coral_markets_bot.services.policy.notification_policy import NotificationPolicy


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DispatchReport:
    """Outcome counters of one dispatch (for logging and tests)."""

    channels_delivered: int = 0
    channels_failed: int = 0
    channels_skipped: int = 0
    users_delivered: int = 0
    users_failed: int = 0

    @property
    def failures(self) -> int:
        return self.channels_failed + self.users_failed

    def as_dict(self) -> dict[str, int]:
        return {
            "channels_delivered": self.channels_delivered,
            "channels_failed": self.channels_failed,
            "channels_skipped": self.channels_skipped,
            "users_delivered": self.users_delivered,
            "users_failed": self.users_failed,
        }


class FanoutDispatcher:
    """Two sequential passes: channels (feed config), then users (subscriptions).

    Each delivery is attempted once; a failure is logged and the pass goes on.
    Store snapshots are taken up front, so no store lock is held while sending.
    """

    def __init__(
        self,
        store: "ISubscriptionStore",
        policy: "NotificationPolicy",
        delivery: "BaseDeliveryStrategy",
        *,
        clock: Optional[Callable[[], datetime]] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._store = store
        self._policy = policy
        self._delivery = delivery
        self._clock = clock or _utc_now
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def dispatch(
        self,
        message: str,
        market: "Market",
        *,
        cadence_gated: bool = False,
    ) -> DispatchReport:
        """Fan out a message for a market.

        Args:
            message: Rendered text.
            market: The market the message is about (category, creator, cadence).
            cadence_gated: Apply per-channel update cadence (update-class events).

        Returns:
            DispatchReport with per-pass counters.
        """
        report = DispatchReport()
        await self._channel_pass(message, market, cadence_gated, report)
        await self._user_pass(message, market, report)
        self._logger.info(
            "fanout_dispatched",
            market_id=market.id,
            cadence_gated=cadence_gated,
            **report.as_dict(),
        )
        return report

    async def send_direct(self, user_id: str, message: str) -> None:
        """Send a single direct message.

        Raises:
            DeliveryError: When the direct channel cannot be opened or the send fails.
        """
        await self._delivery.send_direct_message(user_id, message)
        self._logger.debug("direct_message_sent", user_id=user_id)

    async def _channel_pass(
        self,
        message: str,
        market: "Market",
        cadence_gated: bool,
        report: DispatchReport,
    ) -> None:
        configs = await self._store.list_channel_configs()
        for config in configs:
            if not config.feed_enabled:
                report.channels_skipped += 1
                continue
            if not self._policy.category_allowed(config.allowed_categories, market.category):
                report.channels_skipped += 1
                continue
            now = self._clock()
            if cadence_gated and not self._policy.should_send_update(
                market, config.frequency, config.last_update, now=now
            ):
                report.channels_skipped += 1
                continue
            try:
                await self._delivery.send_to_channel(config.channel_id, message)
            except Exception as exc:
                report.channels_failed += 1
                self._log_failure("channel_delivery_failed", config.channel_id, market, exc)
                continue
            report.channels_delivered += 1
            if cadence_gated:
                await self._store.record_channel_update(config.channel_id, now)

    async def _user_pass(self, message: str, market: "Market", report: DispatchReport) -> None:
        subscribers = await self._store.list_subscribers()
        for subscriber in subscribers:
            if not self._policy.should_notify_user(subscriber, market):
                continue
            try:
                await self._delivery.send_direct_message(subscriber.user_id, message)
            except Exception as exc:
                report.users_failed += 1
                self._log_failure("user_delivery_failed", subscriber.user_id, market, exc)
                continue
            report.users_delivered += 1

    def _log_failure(self, event: str, target: str, market: "Market", exc: Exception) -> None:
        self._logger.warning(
            event,
            target=target,
            market_id=market.id,
            error_stage=exc.stage if isinstance(exc, DeliveryError) else None,
            error_type=type(exc).__name__,
            error_message=str(exc),
        )
