"""Document-store implementation of NotificationRepository.

Notifications are deliberately outside the order transaction: every
call here opens its own short transaction on the store, and the
read paths never write the file.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from storefront.domain.model.notification import Notification, NotificationType, Priority
from storefront.domain.repository.notification_repository import NotificationRepository
from storefront.infrastructure.persistence.document_store import DocumentStore

COLLECTION = "notifications"


class JsonNotificationRepository(NotificationRepository):

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def add(self, notification: Notification) -> None:
        if notification.id is None:
            notification.id = uuid.uuid4().hex
        with self._store.transaction() as txn:
            txn.collection(COLLECTION)[notification.id] = self._to_raw(notification)

    def list_for_recipient(self, recipient_id: str, limit: int = 50) -> list[Notification]:
        with self._store.read() as txn:
            docs = list(txn.collection(COLLECTION).values())
        mine = [self._to_domain(raw) for raw in docs if raw["recipient_id"] == recipient_id]
        mine.sort(key=lambda n: n.created_at, reverse=True)
        return mine[:limit]

    def count_unread(self, recipient_id: str) -> int:
        with self._store.read() as txn:
            docs = list(txn.collection(COLLECTION).values())
        return sum(1 for raw in docs if raw["recipient_id"] == recipient_id and not raw["read"])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(n: Notification) -> dict:
        return {
            "id": n.id,
            "recipient_id": n.recipient_id,
            "type": n.type.value,
            "message": n.message,
            "related_id": n.related_id,
            "priority": n.priority.value,
            "read": n.read,
            "created_at": n.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Notification:
        return Notification(
            id=raw["id"],
            recipient_id=raw["recipient_id"],
            type=NotificationType(raw["type"]),
            message=raw["message"],
            related_id=raw.get("related_id"),
            priority=Priority(raw.get("priority", "normal")),
            read=raw.get("read", False),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
