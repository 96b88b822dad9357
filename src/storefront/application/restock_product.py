"""Application service: Restock Product use case."""

from __future__ import annotations

from storefront.application.unit_of_work import UnitOfWorkFactory
from storefront.domain.exceptions import AuthorizationError, EntityNotFoundError
from storefront.domain.model.actor import Actor, Role
from storefront.domain.model.product import Product


class RestockProductHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, actor: Actor, product_id: str, quantity: int) -> Product:
        """Set the on-hand quantity for a product."""
        with self._uow_factory() as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product not found ({product_id})", product_id=product_id)
            if actor.active_role is not Role.ADMIN and product.seller_id != actor.id:
                raise AuthorizationError("Only the product's seller can restock it")
            product.restock(quantity)
            uow.products.save(product)
            uow.commit()
        return product
