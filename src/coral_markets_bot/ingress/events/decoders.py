# -*- coding: utf-8 -*-
"""Decoders: raw event payloads -> Market (+ BuyDetails).

Each event kind carries a different subset of market fields; the decoder sets
the status implied by the event and leaves the rest at their defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import ValidationError

from coral_markets_bot.ingress.events.schemas import (
    LegacyWebhookEnvelope,
    MarketBuyPayload,
    MarketPayload,
    MarketResolvedPayload,
    MarketUpdatePayload,
    NewMarketPayload,
    TradingEndPayload,
    TradingStartPayload,
)
from coral_markets_bot.models.market import (
    BuyDetails,
    Market,
    MarketEventKind,
    MarketStatus,
)


class PayloadDecodeError(ValueError):
    """Raised when a payload does not match its event schema."""


@dataclass(frozen=True, slots=True)
class DecodedEvent:
    kind: MarketEventKind
    market: Market
    buy: Optional[BuyDetails] = None


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 / ISO 8601 timestamp. Unparseable, empty or zero-year values give None.

    Naive timestamps are taken as UTC.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.year <= 1:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_status(value: str) -> MarketStatus:
    """Map a status string to MarketStatus. Unknown values are closed (never updated)."""
    try:
        return MarketStatus(str(value).strip().lower())
    except ValueError:
        return MarketStatus.CLOSED


def market_from_payload(payload: MarketPayload) -> Market:
    return Market(
        id=payload.market_id,
        title=payload.title,
        description=payload.description,
        outcomes=tuple(payload.outcomes),
        percentages=tuple(payload.percentages),
        category=payload.category,
        creator=payload.creator,
        volume=payload.volume,
        start_time=parse_timestamp(payload.start_time),
        end_time=parse_timestamp(payload.end_time),
        status=parse_status(payload.status),
        resolved_outcome=payload.resolved_outcome or None,
        link=payload.link,
    )


def _validate(model: type, data: Any) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise PayloadDecodeError(str(e)) from e


def decode_market(data: Any) -> Market:
    """Decode a full market record (backend response, legacy envelope body)."""
    return market_from_payload(_validate(MarketPayload, data))


def decode_legacy_webhook(data: Any, expected_event_type: str) -> Market:
    """Decode {"event_type", "market"} and check event_type against the route.

    Raises:
        PayloadDecodeError: On schema mismatch or a different event_type.
    """
    envelope: LegacyWebhookEnvelope = _validate(LegacyWebhookEnvelope, data)
    if envelope.event_type != expected_event_type:
        raise PayloadDecodeError(
            f"Invalid event type {envelope.event_type!r}, expected {expected_event_type!r}"
        )
    return market_from_payload(envelope.market)


def decode_new_market(data: Any) -> DecodedEvent:
    p: NewMarketPayload = _validate(NewMarketPayload, data)
    market = Market(
        id=p.market_id,
        title=p.title,
        description=p.description,
        outcomes=tuple(o.name for o in p.outcomes),
        category=p.category,
        creator=p.creator,
        volume=p.volume,
        start_time=parse_timestamp(p.start_time),
        end_time=parse_timestamp(p.end_time),
        status=MarketStatus.ACTIVE,
        link=p.link,
    )
    return DecodedEvent(MarketEventKind.NEW_MARKET, market)


def decode_market_update(data: Any) -> DecodedEvent:
    p: MarketUpdatePayload = _validate(MarketUpdatePayload, data)
    market = Market(
        id=p.market_id,
        title=p.title,
        category=p.category,
        creator=p.creator,
        volume=p.volume,
        end_time=parse_timestamp(p.end_time),
        status=MarketStatus.ACTIVE,
        link=p.link,
    )
    return DecodedEvent(MarketEventKind.MARKET_UPDATE, market)


def decode_trading_start(data: Any) -> DecodedEvent:
    p: TradingStartPayload = _validate(TradingStartPayload, data)
    market = Market(
        id=p.market_id,
        title=p.title,
        description=p.description,
        outcomes=tuple(p.outcomes),
        category=p.category,
        creator=p.creator,
        end_time=parse_timestamp(p.end_time),
        status=MarketStatus.ACTIVE,
        link=p.link,
    )
    return DecodedEvent(MarketEventKind.TRADING_START, market)


def decode_trading_end(data: Any) -> DecodedEvent:
    p: TradingEndPayload = _validate(TradingEndPayload, data)
    market = Market(
        id=p.market_id,
        title=p.title,
        description=p.description,
        outcomes=tuple(o.name for o in p.outcomes),
        percentages=tuple(o.pct for o in p.outcomes),
        category=p.category,
        creator=p.creator,
        volume=p.final_pool,
        status=MarketStatus.CLOSED,
        link=p.link,
    )
    return DecodedEvent(MarketEventKind.TRADING_END, market)


def decode_market_resolved(data: Any) -> DecodedEvent:
    p: MarketResolvedPayload = _validate(MarketResolvedPayload, data)
    market = Market(
        id=p.market_id,
        title=p.title,
        category=p.category,
        creator=p.creator,
        volume=p.total_pool,
        status=MarketStatus.RESOLVED,
        resolved_outcome=p.winning_outcome or None,
        link=p.link,
    )
    return DecodedEvent(MarketEventKind.MARKET_RESOLVED, market)


def decode_market_buy(data: Any) -> DecodedEvent:
    p: MarketBuyPayload = _validate(MarketBuyPayload, data)
    market = Market(id=p.market_id, title=p.title, link=p.link)
    buy = BuyDetails(amount=p.amount, outcome=p.outcome, buyer=p.buyer)
    return DecodedEvent(MarketEventKind.MARKET_BUY, market, buy)


EVENT_DECODERS: dict[MarketEventKind, Callable[[Any], DecodedEvent]] = {
    MarketEventKind.NEW_MARKET: decode_new_market,
    MarketEventKind.MARKET_UPDATE: decode_market_update,
    MarketEventKind.TRADING_START: decode_trading_start,
    MarketEventKind.TRADING_END: decode_trading_end,
    MarketEventKind.MARKET_RESOLVED: decode_market_resolved,
    MarketEventKind.MARKET_BUY: decode_market_buy,
}


def decode_event(kind: MarketEventKind, data: Any) -> DecodedEvent:
    """Decode a payload with the decoder registered for kind."""
    return EVENT_DECODERS[kind](data)
