"""Integration tests for the CancelOrder use case."""

import pytest

from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.notifications import NotificationService, OrderNotifications
from storefront.domain.exceptions import AuthorizationError, ConflictError, EntityNotFoundError
from storefront.domain.model.actor import Actor, Role
from storefront.domain.model.order import Order, OrderLineItem, OrderStatus, PaymentMethod
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress
from tests.fakes import (
    FakeNotificationRepository,
    FakeProductRepository,
    FakeUnitOfWork,
    RecordingNotifier,
)

BUYER = Actor("B1", Role.BUYER)


def _setup():
    """One order for 2 x P1 and 3 x P2, stock already taken out."""
    uow = FakeUnitOfWork(
        products=FakeProductRepository([
            Product(id="P1", title="Mug", price=Money.of("5.00"), quantity=3, seller_id="S1"),
            Product(id="P2", title="Cup", price=Money.of("5.00"), quantity=7, seller_id="S2"),
        ])
    )
    order = Order.create(
        buyer_id="B1",
        items=[
            OrderLineItem("P1", "Mug", "S1", Quantity(2), Money.of("5.00")),
            OrderLineItem("P2", "Cup", "S2", Quantity(3), Money.of("5.00")),
        ],
        shipping_address=ShippingAddress("1 Main St", "Springfield", "555-0100"),
        payment_method=PaymentMethod.CASH_ON_DELIVERY,
    )
    uow.orders.save(order)
    notification_repo = FakeNotificationRepository()
    notifications = OrderNotifications(NotificationService(notification_repo, RecordingNotifier()))
    return CancelOrderHandler(uow, notifications), uow, order.id, notification_repo


class TestCancelOrder:

    def test_restores_stock(self):
        handler, uow, order_id, _ = _setup()
        dto = handler.handle(BUYER, order_id)

        assert dto.status == "Cancelled"
        assert [h.status for h in dto.history] == ["Processing", "Cancelled"]
        assert uow.products.get_by_id("P1").quantity == 5
        assert uow.products.get_by_id("P2").quantity == 10

    def test_second_cancel_does_not_credit_twice(self):
        handler, uow, order_id, _ = _setup()
        handler.handle(BUYER, order_id)

        with pytest.raises(ConflictError, match="cannot be cancelled"):
            handler.handle(BUYER, order_id)
        assert uow.products.get_by_id("P1").quantity == 5
        assert uow.products.get_by_id("P2").quantity == 10

    def test_shipped_order_can_be_cancelled(self):
        handler, uow, order_id, _ = _setup()
        uow.orders.get_by_id(order_id).transition_to(OrderStatus.SHIPPED, changed_by="S1")
        assert handler.handle(BUYER, order_id).status == "Cancelled"

    def test_delivered_order_cannot_be_cancelled(self):
        handler, uow, order_id, _ = _setup()
        uow.orders.get_by_id(order_id).transition_to(OrderStatus.DELIVERED, changed_by="A1")
        with pytest.raises(ConflictError):
            handler.handle(BUYER, order_id)
        assert uow.products.get_by_id("P1").quantity == 3

    def test_involved_seller_may_cancel(self):
        handler, _, order_id, _ = _setup()
        assert handler.handle(Actor("S2", Role.SELLER), order_id).status == "Cancelled"

    def test_stranger_rejected(self):
        handler, uow, order_id, _ = _setup()
        with pytest.raises(AuthorizationError):
            handler.handle(Actor("B2", Role.BUYER), order_id)
        assert uow.orders.get_by_id(order_id).status == OrderStatus.PROCESSING

    def test_unknown_order(self):
        handler, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="not found"):
            handler.handle(BUYER, "missing")

    def test_deleted_product_is_skipped(self):
        handler, uow, order_id, _ = _setup()
        uow.products.remove("P2")

        dto = handler.handle(BUYER, order_id)
        assert dto.status == "Cancelled"
        assert uow.products.get_by_id("P1").quantity == 5
        assert [i.title for i in dto.items] == ["Mug", "Cup"]

    def test_buyer_is_notified(self):
        handler, _, order_id, notification_repo = _setup()
        handler.handle(BUYER, order_id)
        assert [n.message for n in notification_repo.for_recipient("B1")] == [
            f"Order #{order_id} status changed to Cancelled"
        ]
        assert notification_repo.for_recipient("S1") == []
