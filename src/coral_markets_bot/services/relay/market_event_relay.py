# -*- coding: utf-8 -*-
"""MarketEventRelay: listens to MarketEventReceived, renders the message and fans it out."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog

from coral_markets_bot.events.market_events import MarketEventReceived
from coral_markets_bot.models.market import MarketEventKind

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]

    from coral_markets_bot.models.market import BuyDetails, Market
    from coral_markets_bot.services.dispatch.fanout_dispatcher import (
        DispatchReport,
        FanoutDispatcher,
    )
    from coral_markets_bot.services.rendering.market_renderer import MarketMessageRenderer

# Only periodic updates respect per-channel cadence.
CADENCE_GATED_KINDS = frozenset({MarketEventKind.MARKET_UPDATE})


class MarketEventRelay:
    """Subscribes to MarketEventReceived and forwards each event to the dispatcher."""

    def __init__(
        self,
        event_bus: Any,
        renderer: "MarketMessageRenderer",
        dispatcher: "FanoutDispatcher",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._event_bus: "EventBus" = event_bus
        self._renderer = renderer
        self._dispatcher = dispatcher
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def start(self) -> None:
        """Subscribe to MarketEventReceived."""
        self._event_bus.on(MarketEventReceived, self._on_market_event)
        self._logger.debug("market_event_relay_started")

    def stop(self) -> None:
        """Unsubscribe from MarketEventReceived."""
        key = MarketEventReceived.__name__
        handlers = getattr(self._event_bus, "handlers", {})
        if key in handlers:
            handlers[key] = [h for h in handlers[key] if h != self._on_market_event]
        self._logger.debug("market_event_relay_stopped")

    async def relay(
        self,
        kind: MarketEventKind,
        market: "Market",
        buy: Optional["BuyDetails"] = None,
    ) -> "DispatchReport":
        """Render and dispatch one market event."""
        message = self._renderer.render(kind, market, buy)
        report = await self._dispatcher.dispatch(
            message,
            market,
            cadence_gated=kind in CADENCE_GATED_KINDS,
        )
        self._logger.debug(
            "market_event_relayed",
            kind=kind.value,
            market_id=market.id,
            failures=report.failures,
        )
        return report

    async def _on_market_event(self, event: MarketEventReceived) -> None:
        try:
            await self.relay(event.kind, event.market, event.buy)
        except Exception as exc:
            self._logger.exception(
                "market_event_relay_failed",
                kind=event.kind.value,
                market_id=event.market.id,
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
