"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass
from functools import cached_property, lru_cache

from storefront.application.add_product import AddProductHandler
from storefront.application.add_to_cart import AddToCartHandler, ShowCartHandler
from storefront.application.add_tracking_number import AddTrackingNumberHandler
from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.checkout import CheckoutHandler
from storefront.application.notifications import NotificationService, OrderNotifications
from storefront.application.restock_product import RestockProductHandler
from storefront.application.show_order import ListOrdersHandler, OrderStatsHandler, ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.service.stock_alerts import StockAlertPolicy
from storefront.infrastructure.config import Settings, get_settings
from storefront.infrastructure.persistence.document_store import DocumentStore
from storefront.infrastructure.persistence.json_notification_repository import (
    JsonNotificationRepository,
)
from storefront.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork
from storefront.infrastructure.realtime.channel_hub import ChannelHub


@dataclass
class Container:
    settings: Settings
    store: DocumentStore
    hub: ChannelHub
    executor: Executor | None = None

    def unit_of_work(self) -> JsonUnitOfWork:
        return JsonUnitOfWork(self.store)

    @cached_property
    def notification_service(self) -> NotificationService:
        return NotificationService(JsonNotificationRepository(self.store), self.hub)

    @cached_property
    def order_notifications(self) -> OrderNotifications:
        return OrderNotifications(
            self.notification_service,
            stock_policy=StockAlertPolicy(self.settings.low_stock_threshold),
            executor=self.executor,
        )

    # --- Handlers -------------------------------------------------------------

    def checkout(self) -> CheckoutHandler:
        return CheckoutHandler(
            self.unit_of_work,
            self.order_notifications,
            total_tolerance=self.settings.total_tolerance,
        )

    def update_order_status(self) -> UpdateOrderStatusHandler:
        return UpdateOrderStatusHandler(self.unit_of_work, self.order_notifications)

    def cancel_order(self) -> CancelOrderHandler:
        return CancelOrderHandler(self.unit_of_work, self.order_notifications)

    def add_tracking_number(self) -> AddTrackingNumberHandler:
        return AddTrackingNumberHandler(self.unit_of_work)

    def show_order(self) -> ShowOrderHandler:
        return ShowOrderHandler(self.unit_of_work)

    def list_orders(self) -> ListOrdersHandler:
        return ListOrdersHandler(self.unit_of_work)

    def order_stats(self) -> OrderStatsHandler:
        return OrderStatsHandler(self.unit_of_work)

    def add_to_cart(self) -> AddToCartHandler:
        return AddToCartHandler(self.unit_of_work)

    def show_cart(self) -> ShowCartHandler:
        return ShowCartHandler(self.unit_of_work)

    def add_product(self) -> AddProductHandler:
        return AddProductHandler(self.unit_of_work)

    def restock_product(self) -> RestockProductHandler:
        return RestockProductHandler(self.unit_of_work)


def build_container(
    settings: Settings | None = None,
    *,
    executor: Executor | None = None,
    in_memory: bool = False,
) -> Container:
    settings = settings or get_settings()
    store = DocumentStore(
        None if in_memory else settings.store_path,
        transaction_timeout=settings.transaction_timeout,
    )
    return Container(settings=settings, store=store, hub=ChannelHub(), executor=executor)


@lru_cache(maxsize=1)
def default_container() -> Container:
    return build_container()
