# -*- coding: utf-8 -*-
"""Shared utilities."""

from coral_markets_bot.utils.rwlock import AsyncReadWriteLock

__all__ = ["AsyncReadWriteLock"]
