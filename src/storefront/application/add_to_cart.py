"""Application services: cart use cases."""

from __future__ import annotations

from storefront.application.dto import CartDTO, CartItemDTO
from storefront.application.unit_of_work import UnitOfWorkFactory
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.actor import Actor
from storefront.domain.model.cart import Cart


class AddToCartHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, actor: Actor, product_id: str, quantity: int) -> CartDTO:
        with self._uow_factory() as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product not found ({product_id})", product_id=product_id)

            cart = uow.carts.get_for_buyer(actor.id) or Cart(buyer_id=actor.id)
            cart.add(product.id, quantity, product.price)
            uow.carts.save(cart)
            uow.commit()
        return to_cart_dto(cart)


class ShowCartHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, actor: Actor) -> CartDTO:
        with self._uow_factory() as uow:
            cart = uow.carts.get_for_buyer(actor.id) or Cart(buyer_id=actor.id)
        return to_cart_dto(cart)


def to_cart_dto(cart: Cart) -> CartDTO:
    return CartDTO(
        buyer_id=cart.buyer_id,
        items=[
            CartItemDTO(product_id=i.product_id, quantity=i.quantity, price=i.price.amount)
            for i in cart.items
        ],
        total=cart.total.amount,
    )
