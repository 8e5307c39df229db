# -*- coding: utf-8 -*-
"""Subscriber: a user's market and creator notification interests.

Identity is user_id (chat platform user id). Records are immutable; the with_*
helpers return updated copies that must be saved through the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True, slots=True)
class Subscriber:
    """Subscribed market ids and creator names for one user."""

    user_id: str
    markets: frozenset[str] = field(default_factory=frozenset)
    creators: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def empty(cls, user_id: str) -> Subscriber:
        """Return a record with no subscriptions."""
        return cls(user_id=user_id)

    @property
    def has_subscriptions(self) -> bool:
        return bool(self.markets or self.creators)

    def with_market(self, market_id: str) -> Subscriber:
        return replace(self, markets=self.markets | {market_id})

    def without_market(self, market_id: str) -> Subscriber:
        return replace(self, markets=self.markets - {market_id})

    def with_creator(self, creator: str) -> Subscriber:
        return replace(self, creators=self.creators | {creator})

    def without_creator(self, creator: str) -> Subscriber:
        return replace(self, creators=self.creators - {creator})
