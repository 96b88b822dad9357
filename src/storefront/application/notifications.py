"""Notification fan-out.

Everything here runs *after* the order transaction has committed and is
best-effort: a broken channel or notification store is logged and then
ignored, never reported as a failed checkout or transition.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import Any

import structlog

from storefront.domain.model.notification import Notification, NotificationType, Priority
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.product import Product
from storefront.domain.repository.notification_repository import NotificationRepository
from storefront.domain.service.stock_alerts import StockAlertPolicy

logger = structlog.get_logger(__name__)

NOTIFICATION_EVENT = "notificationUpdate"

# Sellers hear about these transitions; the buyer hears about every one.
SELLER_NOTIFIED_STATUSES = (OrderStatus.PROCESSING, OrderStatus.DELIVERED)


class Notifier(ABC):
    """Per-recipient real-time channel."""

    @abstractmethod
    def publish(self, recipient_id: str, event: dict[str, Any]) -> None:
        """Push *event* to the recipient; a no-op if nobody is listening."""


class NotificationService:

    def __init__(self, notification_repo: NotificationRepository, notifier: Notifier) -> None:
        self._notification_repo = notification_repo
        self._notifier = notifier

    def notify(
        self,
        recipient_id: str,
        notification_type: NotificationType,
        message: str,
        related_id: str | None = None,
        priority: Priority = Priority.NORMAL,
    ) -> Notification | None:
        """Persist a notification and push it to the recipient's channel.

        Returns None when anything along the way failed.
        """
        try:
            notification = Notification(
                id=None,
                recipient_id=recipient_id,
                type=notification_type,
                message=message,
                related_id=related_id,
                priority=priority,
            )
            self._notification_repo.add(notification)
            unread = self._notification_repo.count_unread(recipient_id)
            self._notifier.publish(
                recipient_id,
                {
                    "event": NOTIFICATION_EVENT,
                    "notification": notification.to_payload(),
                    "unread_count": unread,
                    "highlight_id": related_id,
                },
            )
        except Exception:
            logger.exception(
                "notification_failed",
                recipient_id=recipient_id,
                type=notification_type.value,
                related_id=related_id,
            )
            return None
        return notification

    def inbox(self, recipient_id: str, limit: int = 50) -> tuple[list[Notification], int]:
        return (
            self._notification_repo.list_for_recipient(recipient_id, limit),
            self._notification_repo.count_unread(recipient_id),
        )


class OrderNotifications:
    """Composes the order-related messages and hands them to the service.

    With an executor the sends are fire-and-forget; without one they run
    inline, still after commit and still unable to raise.
    """

    def __init__(
        self,
        service: NotificationService,
        stock_policy: StockAlertPolicy | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._service = service
        self._stock_policy = stock_policy or StockAlertPolicy()
        self._executor = executor

    def order_placed(self, order: Order, reserved: list[Product]) -> None:
        for product in self._stock_policy.low_stock(reserved):
            self._dispatch(
                product.seller_id,
                NotificationType.PRODUCT,
                f'Product "{product.title}" is low in stock (only {product.quantity} left)',
                product.id,
                Priority.HIGH,
            )
        for seller_id in order.seller_ids:
            self._dispatch(
                seller_id,
                NotificationType.ORDER,
                f"New order #{order.id} received",
                order.id,
                Priority.NORMAL,
            )

    def status_changed(self, order: Order) -> None:
        message = f"Order #{order.id} status changed to {order.status.value}"
        self._dispatch(order.buyer_id, NotificationType.ORDER, message, order.id, Priority.NORMAL)
        if order.status in SELLER_NOTIFIED_STATUSES:
            for seller_id in order.seller_ids:
                self._dispatch(seller_id, NotificationType.ORDER, message, order.id, Priority.NORMAL)

    def _dispatch(self, *args: Any) -> None:
        if self._executor is None:
            self._service.notify(*args)
            return
        try:
            self._executor.submit(self._service.notify, *args)
        except RuntimeError:
            # Executor already shut down (process exiting).
            logger.warning("notification_dropped", recipient_id=args[0])
