"""Domain service: the single low-stock alert policy."""

from __future__ import annotations

from storefront.domain.model.product import Product

LOW_STOCK_THRESHOLD = 5


class StockAlertPolicy:
    """Which products deserve a replenishment alert to their seller.

    Consulted once, after a reservation has committed.  Any product left
    at or below the threshold is reported, each product once.
    """

    def __init__(self, threshold: int = LOW_STOCK_THRESHOLD) -> None:
        self.threshold = threshold

    def is_low(self, product: Product) -> bool:
        return product.quantity <= self.threshold

    def low_stock(self, products: list[Product]) -> list[Product]:
        seen: set[str] = set()
        result: list[Product] = []
        for product in products:
            if product.id in seen or not self.is_low(product):
                continue
            seen.add(product.id)
            result.append(product)
        return result
