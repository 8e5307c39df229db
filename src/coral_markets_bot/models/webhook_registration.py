# -*- coding: utf-8 -*-
"""WebhookRegistration: an external delivery target and its filter preferences.

Registrations are stored and listed but not consulted by the fan-out dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional

from coral_markets_bot.models.channel_config import FrequencyTier


@dataclass(frozen=True, slots=True)
class WebhookRegistration:
    """A registered webhook for a channel.

    id and created_at are empty until the store registers the record.
    """

    channel_id: str
    webhook_url: str
    events: tuple[str, ...] = ()
    frequency: str = ""
    allowed_categories: tuple[str, ...] = ()
    id: str = ""
    created_at: Optional[datetime] = None

    def registered(self, registration_id: str, created_at: datetime) -> WebhookRegistration:
        """Return a copy stamped with id, creation time and a default frequency."""
        return replace(
            self,
            id=registration_id,
            created_at=created_at,
            frequency=self.frequency or FrequencyTier.MEDIUM.value,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "id": self.id,
            "channel_id": self.channel_id,
            "webhook_url": self.webhook_url,
            "events": list(self.events),
            "frequency": self.frequency,
            "allowed_categories": list(self.allowed_categories),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
