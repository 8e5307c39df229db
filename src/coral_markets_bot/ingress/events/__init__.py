# -*- coding: utf-8 -*-
"""Event payload schemas and decoders."""

from coral_markets_bot.ingress.events.decoders import (
    EVENT_DECODERS,
    DecodedEvent,
    PayloadDecodeError,
    decode_event,
    decode_legacy_webhook,
    decode_market,
    parse_timestamp,
)

__all__ = [
    "EVENT_DECODERS",
    "DecodedEvent",
    "PayloadDecodeError",
    "decode_event",
    "decode_legacy_webhook",
    "decode_market",
    "parse_timestamp",
]
