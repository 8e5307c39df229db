# -*- coding: utf-8 -*-
"""ChannelConfig: per-channel feed configuration and update cadence state."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum


class FrequencyTier(str, Enum):
    """Update cadence tiers for channels and webhook registrations."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


NEVER_UPDATED = datetime.min.replace(tzinfo=timezone.utc)
"""Zero value for last_update: a channel that never received an update."""


@dataclass(frozen=True, slots=True)
class ChannelConfig:
    """Feed settings for one chat channel.

    allowed_categories empty means every category is allowed. frequency is kept
    as a plain string so unknown values coming from storage survive; the policy
    treats them as medium.
    """

    channel_id: str
    feed_enabled: bool = True
    allowed_categories: frozenset[str] = field(default_factory=frozenset)
    frequency: str = FrequencyTier.MEDIUM.value
    last_update: datetime = NEVER_UPDATED

    @classmethod
    def default(cls, channel_id: str) -> ChannelConfig:
        """Return the configuration used for channels never configured."""
        return cls(channel_id=channel_id)

    @property
    def has_been_updated(self) -> bool:
        return self.last_update != NEVER_UPDATED

    def with_feed_enabled(self, enabled: bool) -> ChannelConfig:
        return replace(self, feed_enabled=enabled)

    def with_allowed_categories(self, categories: frozenset[str]) -> ChannelConfig:
        return replace(self, allowed_categories=categories)

    def with_frequency(self, frequency: str) -> ChannelConfig:
        return replace(self, frequency=frequency)

    def with_last_update(self, at: datetime) -> ChannelConfig:
        return replace(self, last_update=at)
