"""Domain service: Inventory Ledger.

The ledger is the only code that changes a product's ``quantity`` on the
order paths.  It works against whatever ProductRepository it is handed;
inside a unit of work that repository is bound to the open transaction,
so every reserve/release commits or rolls back together with the order
write that caused it.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class InventoryLedger:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def reserve(self, product_id: str, quantity: int) -> Product:
        """Conditionally decrement stock.

        Raises InsufficientStockError when fewer than *quantity* units are
        left, which aborts the enclosing transaction.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(
                f"Product not found ({product_id})", product_id=product_id
            )
        product.reserve(quantity)
        self._product_repo.save(product)
        return product

    def release(self, product_id: str, quantity: int) -> Product | None:
        """Unconditionally increment stock.

        A product removed from the catalog since the order was placed has
        nowhere to return units to; that line is skipped.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            logger.warning(
                "release_skipped_missing_product",
                product_id=product_id,
                quantity=quantity,
            )
            return None
        product.release(quantity)
        self._product_repo.save(product)
        return product

    def release_order(self, order: Order) -> None:
        """Return every unit the order reserved, the inverse of checkout."""
        for line in order.items:
            self.release(line.product_id, line.quantity.value)
