"""Application service: Add Product use case (catalog administration)."""

from __future__ import annotations

from storefront.application.unit_of_work import UnitOfWorkFactory
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money


class AddProductHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, seller_id: str, title: str, price: str, quantity: int) -> Product:
        """Add a new product to the catalog."""
        if not title or not title.strip():
            raise ValidationError("Product title is required")
        if not seller_id:
            raise ValidationError("Seller is required")

        with self._uow_factory() as uow:
            # Auto-assign ID based on existing products
            all_products = uow.products.list_all()
            numeric = [int(p.id) for p in all_products if p.id.isdigit()]
            next_id = str(max(numeric) + 1) if numeric else "1"

            product = Product(
                id=next_id,
                title=title.strip(),
                price=Money.of(price),
                quantity=quantity,
                seller_id=seller_id,
            )
            uow.products.save(product)
            uow.commit()
        return product
