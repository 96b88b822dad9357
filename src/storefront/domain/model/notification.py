"""Notification record.

Written as a side effect of checkout and status changes.  Read/unread
state belongs to whoever serves the notification inbox, not to the
order paths that create them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError


class NotificationType(Enum):
    ORDER = "order"
    PRODUCT = "product"
    PRODUCT_AVAILABLE = "product-available"
    SYSTEM = "system"


class Priority(Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


@dataclass
class Notification:
    id: str | None
    recipient_id: str
    type: NotificationType
    message: str
    related_id: str | None = None
    priority: Priority = Priority.NORMAL
    read: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.recipient_id:
            raise ValidationError("Notification recipient is required")
        if not self.message:
            raise ValidationError("Notification message is required")

    def to_payload(self) -> dict:
        """Plain-JSON view pushed over real-time channels."""
        payload = {
            "id": self.id,
            "recipient": self.recipient_id,
            "type": self.type.value,
            "message": self.message,
            "read": self.read,
            "priority": self.priority.value,
            "created_at": self.created_at.isoformat(),
        }
        if self.related_id:
            payload["related_id"] = self.related_id
        return payload
