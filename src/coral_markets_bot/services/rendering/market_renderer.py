# -*- coding: utf-8 -*-
"""MarketMessageRenderer: turns a Market into Telegram HTML message text."""

from __future__ import annotations

import html
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from coral_markets_bot.models.market import BuyDetails, Market, MarketEventKind

NOT_AVAILABLE = "N/A"
ANONYMOUS_BUYER = "Anonymous"
LINK_LABEL = "View on Coral Markets"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _esc(value: object) -> str:
    return html.escape(str(value), quote=False)


def _money(value: float) -> str:
    try:
        return f"${float(value):.2f}"
    except (TypeError, ValueError):
        return "$0.00"


class MarketMessageRenderer:
    """Render market lifecycle messages with emoji headers and HTML formatting.

    Rendering never raises: missing fields fall back to defaults (N/A, 0.0%, Anonymous).
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or _utc_now

    def render(self, kind: MarketEventKind, market: Market, buy: Optional[BuyDetails] = None) -> str:
        """Dispatch to the renderer for the event kind."""
        if kind == MarketEventKind.NEW_MARKET:
            return self.render_announcement(market)
        if kind == MarketEventKind.MARKET_UPDATE:
            return self.render_update(market)
        if kind == MarketEventKind.TRADING_START:
            return self.render_trading_start(market)
        if kind == MarketEventKind.TRADING_END:
            return self.render_trading_end(market)
        if kind == MarketEventKind.MARKET_RESOLVED:
            return self.render_resolution(market)
        if kind == MarketEventKind.MARKET_BUY:
            return self.render_buy(market, buy or BuyDetails(amount=0.0))
        return self._header("📣", "MARKET EVENT", market)

    def render_announcement(self, market: Market) -> str:
        lines = [self._header("🎉", "NEW MARKET ALERT", market)]
        if market.description:
            lines.append(_esc(market.description))
        lines.append("")
        lines.append(f"📊 Volume: {_money(market.volume)}")
        lines.append(f"⏰ Time Left: {self.time_left(market)}")
        lines.append("")
        lines.append("Outcomes:")
        lines.extend(self._outcome_lines(market))
        return self._with_link("\n".join(lines), market)

    def render_update(self, market: Market) -> str:
        lines = [
            self._header("📈", "MARKET UPDATE", market),
            "",
            f"📊 Volume: {_money(market.volume)}",
            f"⏰ Time Left: {self.time_left(market)}",
            "",
            "Current Probabilities:",
        ]
        lines.extend(self._outcome_lines(market))
        return self._with_link("\n".join(lines), market)

    def render_trading_start(self, market: Market) -> str:
        lines = [
            self._header("🟢", "TRADING STARTED", market),
            "",
            "Trading is now open! Place your bets.",
            f"⏰ Time Left: {self.time_left(market)}",
        ]
        return self._with_link("\n".join(lines), market)

    def render_trading_end(self, market: Market) -> str:
        lines = [
            self._header("🔴", "TRADING CLOSED", market),
            "",
            "Betting is now closed. Market will resolve soon.",
            f"📊 Final Volume: {_money(market.volume)}",
        ]
        if market.outcomes:
            lines.append("")
            lines.append("Final Probabilities:")
            lines.extend(self._outcome_lines(market))
        return self._with_link("\n".join(lines), market)

    def render_resolution(self, market: Market) -> str:
        resolved = (
            f"Resolved: <b>{_esc(market.resolved_outcome)}</b>"
            if market.resolved_outcome
            else "Market resolved"
        )
        lines = [
            self._header("✅", "MARKET RESOLVED", market),
            "",
            resolved,
            f"📊 Total Pool: {_money(market.volume)}",
        ]
        return self._with_link("\n".join(lines), market)

    def render_buy(self, market: Market, buy: BuyDetails) -> str:
        lines = [
            self._header("💸", "MARKET BUY", market),
            "",
            f"Buyer: {_esc(buy.buyer or ANONYMOUS_BUYER)}",
            f"Amount: {_money(buy.amount)}",
            f"Outcome: {_esc(buy.outcome or NOT_AVAILABLE)}",
        ]
        return self._with_link("\n".join(lines), market)

    def time_left(self, market: Market) -> str:
        """end_time minus now as str(timedelta) truncated to seconds, or N/A."""
        if market.end_time is None:
            return NOT_AVAILABLE
        remaining = market.end_time - self._clock()
        return str(timedelta(seconds=int(remaining.total_seconds())))

    def _header(self, emoji: str, label: str, market: Market) -> str:
        title = _esc(market.title) if market.title else _esc(market.id)
        return f"{emoji} <b>{label}</b> {emoji}\n\n<b>{title}</b>"

    @staticmethod
    def _outcome_lines(market: Market) -> list[str]:
        return [
            f"- {_esc(name)} ({market.percentage_at(i):.1f}%)"
            for i, name in enumerate(market.outcomes)
        ]

    @staticmethod
    def _with_link(text: str, market: Market) -> str:
        if not market.link:
            return text
        href = html.escape(market.link, quote=True)
        return f'{text}\n\n🔗 <a href="{href}">{LINK_LABEL}</a>'
