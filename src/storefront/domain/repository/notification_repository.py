"""Abstract repository for Notification records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.notification import Notification


class NotificationRepository(ABC):

    @abstractmethod
    def add(self, notification: Notification) -> None:
        """Persist a new notification, assigning its ID."""

    @abstractmethod
    def list_for_recipient(self, recipient_id: str, limit: int = 50) -> list[Notification]:
        """Return the recipient's latest notifications, newest first."""

    @abstractmethod
    def count_unread(self, recipient_id: str) -> int:
        """Return how many of the recipient's notifications are unread."""
