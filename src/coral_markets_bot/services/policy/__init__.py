# -*- coding: utf-8 -*-
"""Notification policy (pure decision logic)."""

from coral_markets_bot.services.policy.notification_policy import (
    CLOSING_SOON_INTERVAL,
    CLOSING_SOON_WINDOW,
    NotificationPolicy,
)

__all__ = ["CLOSING_SOON_INTERVAL", "CLOSING_SOON_WINDOW", "NotificationPolicy"]
