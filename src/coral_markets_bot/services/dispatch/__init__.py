# -*- coding: utf-8 -*-
"""Fan-out dispatch."""

from coral_markets_bot.services.dispatch.fanout_dispatcher import DispatchReport, FanoutDispatcher

__all__ = ["DispatchReport", "FanoutDispatcher"]
