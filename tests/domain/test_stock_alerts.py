"""Unit tests for the low-stock alert policy."""

from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.service.stock_alerts import StockAlertPolicy


def _product(product_id: str, quantity: int) -> Product:
    return Product(id=product_id, title=product_id, price=Money.of("1.00"), quantity=quantity, seller_id="S1")


def test_threshold_is_inclusive():
    policy = StockAlertPolicy(threshold=5)
    assert policy.is_low(_product("P1", 5))
    assert not policy.is_low(_product("P1", 6))


def test_low_stock_reports_each_product_once():
    policy = StockAlertPolicy()
    products = [_product("P1", 2), _product("P2", 40), _product("P1", 2), _product("P3", 0)]
    assert [p.id for p in policy.low_stock(products)] == ["P1", "P3"]
