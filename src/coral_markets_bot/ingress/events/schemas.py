# -*- coding: utf-8 -*-
"""Pydantic models for inbound event payloads (HTTP bodies, backend responses).

Every field has a default so partially populated events still decode; unknown
keys are ignored. Timestamps stay raw strings here and are parsed by the decoders.
"""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

# Telegram and market ids arrive as JSON numbers or strings.
Identifier = Annotated[str, BeforeValidator(lambda v: str(v) if isinstance(v, int) else v)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class MarketPayload(_Payload):
    """Full market record (legacy webhooks and the market backend)."""

    market_id: Identifier = ""
    title: str = ""
    description: str = ""
    outcomes: list[str] = Field(default_factory=list)
    percentages: list[float] = Field(default_factory=list)
    category: str = ""
    creator: str = ""
    volume: float = 0.0
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    status: str = "active"
    resolved_outcome: Optional[str] = None
    link: str = ""


class LegacyWebhookEnvelope(_Payload):
    """Body of POST /webhooks/<event_type>."""

    event_type: str = ""
    market: MarketPayload = Field(default_factory=MarketPayload)


class OutcomeRef(_Payload):
    id: str = ""
    name: str = ""


class OutcomeShare(OutcomeRef):
    pct: float = 0.0


class NewMarketPayload(_Payload):
    market_id: Identifier = ""
    title: str = ""
    description: str = ""
    creator: str = ""
    category: str = ""
    outcomes: list[OutcomeRef] = Field(default_factory=list)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    volume: float = 0.0
    link: str = ""


class MarketUpdatePayload(_Payload):
    market_id: Identifier = ""
    title: str = ""
    volume: float = 0.0
    volume_delta_pct: float = 0.0
    time_left: str = ""
    """Informational; time left is recomputed from end_time."""
    end_time: Optional[str] = None
    category: str = ""
    creator: str = ""
    link: str = ""


class TradingStartPayload(_Payload):
    market_id: Identifier = ""
    title: str = ""
    description: str = ""
    duration: str = ""
    outcomes_count: int = 0
    outcomes: list[str] = Field(default_factory=list)
    end_time: Optional[str] = None
    category: str = ""
    creator: str = ""
    link: str = ""


class TradingEndPayload(_Payload):
    market_id: Identifier = ""
    title: str = ""
    description: str = ""
    outcomes: list[OutcomeShare] = Field(default_factory=list)
    final_pool: float = 0.0
    category: str = ""
    creator: str = ""
    link: str = ""


class MarketResolvedPayload(_Payload):
    market_id: Identifier = ""
    title: str = ""
    winning_outcome: str = ""
    total_pool: float = 0.0
    category: str = ""
    creator: str = ""
    link: str = ""


class MarketBuyPayload(_Payload):
    market_id: Identifier = ""
    title: str = ""
    amount: float = 0.0
    outcome: str = ""
    buyer: str = ""
    link: str = ""


class DirectMessageRequest(_Payload):
    """Body of POST /bot/notifications/dm. payload is decoded by type."""

    user_id: Identifier
    type: str
    payload: dict[str, Any] = Field(default_factory=dict)
