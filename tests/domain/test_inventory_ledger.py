"""Unit tests for Product stock rules and the InventoryLedger."""

import pytest

from storefront.domain.exceptions import EntityNotFoundError, InsufficientStockError, ValidationError
from storefront.domain.model.order import Order, OrderLineItem, PaymentMethod
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress
from storefront.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import FakeProductRepository


def _product(quantity: int = 5, product_id: str = "P1") -> Product:
    return Product(id=product_id, title="Mug", price=Money.of("5.00"), quantity=quantity, seller_id="S1")


class TestProductStock:

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError, match="non-negative"):
            _product(quantity=-1)

    def test_reserve_decrements(self):
        p = _product(5)
        p.reserve(3)
        assert p.quantity == 2

    def test_reserve_exact_remaining_hits_zero(self):
        p = _product(2)
        p.reserve(2)
        assert p.quantity == 0

    def test_reserve_more_than_available(self):
        p = _product(1)
        with pytest.raises(InsufficientStockError) as exc_info:
            p.reserve(3)
        assert exc_info.value.available == 1
        assert exc_info.value.details == {"product_id": "P1", "requested": 3, "available": 1}
        assert "need 3, have 1 available" in str(exc_info.value)
        assert p.quantity == 1

    def test_reserve_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            _product().reserve(0)

    def test_release_increments(self):
        p = _product(0)
        p.release(4)
        assert p.quantity == 4

    def test_restock_sets_absolute_quantity(self):
        p = _product(3)
        p.restock(10)
        assert p.quantity == 10

    def test_restock_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            _product().restock(-1)


class TestInventoryLedger:

    def test_reserve_persists_decrement(self):
        repo = FakeProductRepository([_product(5)])
        product = InventoryLedger(repo).reserve("P1", 3)
        assert product.quantity == 2
        assert repo.get_by_id("P1").quantity == 2

    def test_reserve_unknown_product(self):
        ledger = InventoryLedger(FakeProductRepository())
        with pytest.raises(EntityNotFoundError, match="Product not found"):
            ledger.reserve("nope", 1)

    def test_release_missing_product_is_skipped(self):
        ledger = InventoryLedger(FakeProductRepository())
        assert ledger.release("gone", 2) is None

    def test_release_order_restores_every_line(self):
        repo = FakeProductRepository([_product(0, "P1"), _product(1, "P2")])
        order = Order.create(
            buyer_id="B1",
            items=[
                OrderLineItem("P1", "Mug", "S1", Quantity(3), Money.of("5.00")),
                OrderLineItem("P2", "Cup", "S1", Quantity(2), Money.of("5.00")),
                OrderLineItem("P9", "Gone", "S1", Quantity(1), Money.of("5.00")),
            ],
            shipping_address=ShippingAddress("1 Main St", "Springfield", "555-0100"),
            payment_method=PaymentMethod.CASH_ON_DELIVERY,
        )
        InventoryLedger(repo).release_order(order)
        assert repo.get_by_id("P1").quantity == 3
        assert repo.get_by_id("P2").quantity == 3
