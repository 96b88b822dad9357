"""Read-side handlers: show, list and stats."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.application.dto import SellerDashboardDTO, StatusTotalsDTO
from storefront.application.show_order import ListOrdersHandler, OrderStatsHandler, ShowOrderHandler
from storefront.domain.exceptions import AuthorizationError, EntityNotFoundError, ValidationError
from storefront.domain.model.actor import Actor, Role
from storefront.domain.model.order import Order, OrderLineItem, OrderStatus, PaymentMethod
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress
from tests.fakes import FakeProductRepository, FakeUnitOfWork

ADDRESS = ShippingAddress("1 Main St", "Springfield", "555-0100")


def _order(buyer_id: str, seller_id: str, age_minutes: int = 0) -> Order:
    order = Order.create(
        buyer_id=buyer_id,
        items=[OrderLineItem("P1", "Mug", seller_id, Quantity(1), Money.of("5.00"))],
        shipping_address=ADDRESS,
        payment_method=PaymentMethod.CASH_ON_DELIVERY,
    )
    order.created_at = datetime.now(timezone.utc) - timedelta(minutes=age_minutes)
    return order


def _setup():
    uow = FakeUnitOfWork(
        products=FakeProductRepository([
            Product(id="P1", title="Mug (blue)", price=Money.of("5.00"), quantity=9, seller_id="S1"),
        ])
    )
    first = _order("B1", "S1", age_minutes=30)
    second = _order("B1", "S2", age_minutes=10)
    third = _order("B2", "S1", age_minutes=0)
    for order in (first, second, third):
        uow.orders.save(order)
    return uow, first, second, third


class TestShowOrder:

    def test_buyer_sees_own_order_with_live_title(self):
        uow, first, _, _ = _setup()
        dto = ShowOrderHandler(uow).handle(Actor("B1", Role.BUYER), first.id)
        assert dto.items[0].title == "Mug (blue)"
        assert dto.created_at.endswith("UTC")

    def test_other_buyer_rejected(self):
        uow, first, _, _ = _setup()
        with pytest.raises(AuthorizationError):
            ShowOrderHandler(uow).handle(Actor("B2", Role.BUYER), first.id)

    def test_missing_order(self):
        uow, _, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            ShowOrderHandler(uow).handle(Actor("A1", Role.ADMIN), "missing")


class TestListOrders:

    def test_buyer_sees_own_newest_first(self):
        uow, first, second, _ = _setup()
        dtos = ListOrdersHandler(uow).handle(Actor("B1", Role.BUYER))
        assert [d.id for d in dtos] == [second.id, first.id]

    def test_seller_sees_orders_with_their_products(self):
        uow, first, _, third = _setup()
        dtos = ListOrdersHandler(uow).handle(Actor("S1", Role.SELLER))
        assert [d.id for d in dtos] == [third.id, first.id]

    def test_admin_sees_everything(self):
        uow, _, _, _ = _setup()
        assert len(ListOrdersHandler(uow).handle(Actor("A1", Role.ADMIN))) == 3

    def test_status_filter(self):
        uow, first, _, _ = _setup()
        first.cancel(changed_by="B1")
        dtos = ListOrdersHandler(uow).handle(Actor("A1", Role.ADMIN), status="Cancelled")
        assert [d.id for d in dtos] == [first.id]

    def test_bad_status_filter(self):
        uow, _, _, _ = _setup()
        with pytest.raises(ValidationError):
            ListOrdersHandler(uow).handle(Actor("A1", Role.ADMIN), status="Lost")

    def test_mine_ignores_role(self):
        uow, _, _, third = _setup()
        dtos = ListOrdersHandler(uow).handle_mine(Actor("B2", Role.SELLER))
        assert [d.id for d in dtos] == [third.id]

    def test_date_range_is_inclusive(self):
        uow, first, second, third = _setup()
        first.created_at = datetime(2024, 1, 1, 23, 59, tzinfo=timezone.utc)
        second.created_at = datetime(2024, 1, 15, tzinfo=timezone.utc)
        third.created_at = datetime(2024, 2, 1, tzinfo=timezone.utc)
        admin = Actor("A1", Role.ADMIN)

        dtos = ListOrdersHandler(uow).handle(admin, date_from=date(2024, 1, 1), date_to=date(2024, 1, 15))
        assert {d.id for d in dtos} == {first.id, second.id}
        dtos = ListOrdersHandler(uow).handle(admin, date_from=date(2024, 1, 2))
        assert {d.id for d in dtos} == {second.id, third.id}

    def test_inverted_date_range_rejected(self):
        uow, _, _, _ = _setup()
        with pytest.raises(ValidationError, match="date_from"):
            ListOrdersHandler(uow).handle(
                Actor("A1", Role.ADMIN), date_from=date(2024, 2, 1), date_to=date(2024, 1, 1)
            )


class TestSearchOrders:

    def test_pages_newest_first(self):
        uow, first, second, third = _setup()
        handler = ListOrdersHandler(uow)
        admin = Actor("A1", Role.ADMIN)

        page_one = handler.search(admin, page=1, page_size=2)
        assert [d.id for d in page_one.orders] == [third.id, second.id]
        assert (page_one.total, page_one.page, page_one.page_size) == (3, 1, 2)
        assert [d.id for d in handler.search(admin, page=2, page_size=2).orders] == [first.id]
        assert handler.search(admin, page=3, page_size=2).orders == []

    @pytest.mark.parametrize("page, page_size", [(0, 20), (1, 0), (1, 101)])
    def test_bad_paging_rejected(self, page, page_size):
        uow, _, _, _ = _setup()
        with pytest.raises(ValidationError):
            ListOrdersHandler(uow).search(Actor("A1", Role.ADMIN), page=page, page_size=page_size)


class TestOrderStats:

    def test_counts_by_status(self):
        uow, first, second, _ = _setup()
        first.cancel(changed_by="B1")
        second.transition_to(OrderStatus.DELIVERED, changed_by="A1")
        stats = OrderStatsHandler(uow).handle(Actor("B1", Role.BUYER))
        assert (stats.total, stats.completed, stats.pending, stats.cancelled) == (2, 1, 0, 1)

    def test_by_status_breakdown(self):
        uow, first, second, _ = _setup()
        first.cancel(changed_by="B1")
        stats = OrderStatsHandler(uow).handle(Actor("B1", Role.BUYER))
        assert stats.by_status == {
            "Processing": StatusTotalsDTO(count=1, amount=Decimal("5.00")),
            "Cancelled": StatusTotalsDTO(count=1, amount=Decimal("5.00")),
        }

    def test_seller_counts_only_their_lines(self):
        uow = FakeUnitOfWork()
        shared = Order.create(
            buyer_id="B1",
            items=[
                OrderLineItem("P1", "Mug", "S1", Quantity(2), Money.of("5.00")),
                OrderLineItem("P2", "Cup", "S2", Quantity(1), Money.of("7.00")),
            ],
            shipping_address=ADDRESS,
            payment_method=PaymentMethod.CASH_ON_DELIVERY,
        )
        uow.orders.save(shared)
        uow.orders.save(_order("B2", "S2"))

        stats = OrderStatsHandler(uow).handle(Actor("S1", Role.SELLER))
        assert stats.total == 1
        assert stats.by_status == {"Processing": StatusTotalsDTO(count=1, amount=Decimal("10.00"))}

    def test_admin_counts_everything(self):
        uow, first, _, _ = _setup()
        first.transition_to(OrderStatus.SHIPPED, changed_by="S1")
        stats = OrderStatsHandler(uow).handle(Actor("A1", Role.ADMIN))
        assert stats.total == 3
        assert stats.by_status["Processing"] == StatusTotalsDTO(count=2, amount=Decimal("10.00"))
        assert stats.by_status["Shipped"].count == 1

    def test_mine_ignores_role(self):
        uow, _, _, _ = _setup()
        stats = OrderStatsHandler(uow).handle_mine(Actor("B1", Role.SELLER))
        assert (stats.total, stats.pending) == (2, 2)

    def test_seller_dashboard(self):
        uow, first, _, third = _setup()
        first.cancel(changed_by="B1")
        third.transition_to(OrderStatus.DELIVERED, changed_by="A1")
        dashboard = OrderStatsHandler(uow).dashboard(Actor("S1", Role.SELLER))
        assert dashboard == SellerDashboardDTO(
            total_orders=1, completed_orders=1, total_sales=Decimal("5.00")
        )
