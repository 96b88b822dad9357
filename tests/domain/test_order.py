"""Unit tests for the Order aggregate and its state machine."""

import pytest

from storefront.domain.exceptions import ConflictError, ValidationError
from storefront.domain.model.order import (
    MAX_LINE_ITEMS,
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from storefront.domain.model.value_objects import CardNumber, Money, Quantity, ShippingAddress

ADDRESS = ShippingAddress(street="1 Main St", city="Springfield", phone="555-0100")


def _make_item(
    product_id: str = "P1",
    qty: int = 1,
    price: str = "5.00",
    seller_id: str = "S1",
) -> OrderLineItem:
    """Helper to build a valid line item."""
    return OrderLineItem(
        product_id=product_id,
        product_title=f"Product {product_id}",
        seller_id=seller_id,
        quantity=Quantity(qty),
        unit_price=Money.of(price),
    )


def _make_order(items=None, payment_method=PaymentMethod.CASH_ON_DELIVERY, card=None) -> Order:
    return Order.create(
        buyer_id="B1",
        items=items or [_make_item()],
        shipping_address=ADDRESS,
        payment_method=payment_method,
        card=card,
    )


class TestOrderCreation:

    def test_happy_path(self):
        order = _make_order([_make_item("P1", 3, "5.00"), _make_item("P2", 2, "5.00")])
        assert order.buyer_id == "B1"
        assert order.status == OrderStatus.PROCESSING
        assert order.total == Money.of("25.00")

    def test_id_is_none_for_new_orders(self):
        assert _make_order().id is None  # assigned by repository

    def test_history_starts_with_processing_by_buyer(self):
        order = _make_order()
        assert [(h.status, h.changed_by) for h in order.history] == [(OrderStatus.PROCESSING, "B1")]

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Order.create("B1", [], ADDRESS, PaymentMethod.CASH_ON_DELIVERY)

    def test_too_many_lines_rejected(self):
        items = [_make_item(f"P{i}") for i in range(MAX_LINE_ITEMS + 1)]
        with pytest.raises(ValidationError, match="Maximum 20 items"):
            _make_order(items)

    def test_cash_on_delivery_payment_pending(self):
        order = _make_order()
        assert order.payment_status == PaymentStatus.PENDING
        assert order.card_last4 is None

    def test_credit_card_payment_completed_and_masked(self):
        order = _make_order(payment_method=PaymentMethod.CREDIT_CARD, card=CardNumber("4111111111111234"))
        assert order.payment_status == PaymentStatus.COMPLETED
        assert order.card_last4 == "1234"

    def test_credit_card_without_card_rejected(self):
        with pytest.raises(ValidationError, match="card number"):
            _make_order(payment_method=PaymentMethod.CREDIT_CARD)

    def test_seller_ids_are_distinct_in_line_order(self):
        order = _make_order([
            _make_item("P1", seller_id="S2"),
            _make_item("P2", seller_id="S1"),
            _make_item("P3", seller_id="S2"),
        ])
        assert order.seller_ids == ["S2", "S1"]
        assert order.involves_seller("S1")
        assert not order.involves_seller("S9")


class TestOrderTransitions:

    def test_forward_transition_appends_history(self):
        order = _make_order()
        order.transition_to(OrderStatus.SHIPPED, changed_by="S1")
        order.transition_to(OrderStatus.DELIVERED, changed_by="A1")
        assert order.status == OrderStatus.DELIVERED
        assert [h.status for h in order.history] == [
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
        ]
        assert order.history[-1].changed_by == "A1"

    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_states_are_immutable(self, terminal):
        order = _make_order()
        order.transition_to(terminal, changed_by="A1")
        with pytest.raises(ConflictError, match="no further changes"):
            order.transition_to(OrderStatus.PROCESSING, changed_by="A1")
        assert len(order.history) == 2

    def test_same_status_is_a_conflict(self):
        order = _make_order()
        with pytest.raises(ConflictError, match="already Processing"):
            order.transition_to(OrderStatus.PROCESSING, changed_by="A1")
        assert len(order.history) == 1

    def test_parse_rejects_unknown_status(self):
        with pytest.raises(ValidationError, match="Invalid order status"):
            OrderStatus.parse("Lost")


class TestOrderCancel:

    @pytest.mark.parametrize("start", [OrderStatus.PROCESSING, OrderStatus.SHIPPED])
    def test_cancellable_statuses(self, start):
        order = _make_order()
        if start != OrderStatus.PROCESSING:
            order.transition_to(start, changed_by="S1")
        order.cancel(changed_by="B1")
        assert order.status == OrderStatus.CANCELLED

    def test_delivered_cannot_be_cancelled(self):
        order = _make_order()
        order.transition_to(OrderStatus.DELIVERED, changed_by="A1")
        with pytest.raises(ConflictError, match="cannot be cancelled in Delivered"):
            order.cancel(changed_by="B1")

    def test_second_cancel_rejected(self):
        order = _make_order()
        order.cancel(changed_by="B1")
        with pytest.raises(ConflictError, match="cannot be cancelled in Cancelled"):
            order.cancel(changed_by="B1")


class TestTrackingNumber:

    def test_set_and_trimmed(self):
        order = _make_order()
        order.set_tracking_number("  1Z999  ")
        assert order.tracking_number == "1Z999"

    def test_blank_rejected(self):
        with pytest.raises(ValidationError, match="Tracking number is required"):
            _make_order().set_tracking_number(" ")

    def test_cancelled_order_rejected(self):
        order = _make_order()
        order.cancel(changed_by="B1")
        with pytest.raises(ConflictError):
            order.set_tracking_number("1Z999")
