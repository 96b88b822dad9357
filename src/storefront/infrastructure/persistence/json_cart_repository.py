"""Document-store implementation of CartRepository."""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.model.cart import Cart, CartItem
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.document_store import Transaction

COLLECTION = "carts"


class JsonCartRepository(CartRepository):

    def __init__(self, txn: Transaction) -> None:
        self._txn = txn

    def get_for_buyer(self, buyer_id: str) -> Cart | None:
        raw = self._txn.collection(COLLECTION).get(buyer_id)
        if raw is None:
            return None
        return Cart(
            buyer_id=raw["buyer_id"],
            items=[
                CartItem(
                    product_id=i["product_id"],
                    quantity=i["quantity"],
                    price=Money(Decimal(i["price"]), i.get("currency", "USD")),
                )
                for i in raw["items"]
            ],
        )

    def save(self, cart: Cart) -> None:
        self._txn.collection(COLLECTION)[cart.buyer_id] = {
            "buyer_id": cart.buyer_id,
            "items": [
                {
                    "product_id": i.product_id,
                    "quantity": i.quantity,
                    "price": str(i.price.amount),
                    "currency": i.price.currency,
                }
                for i in cart.items
            ],
            "total": str(cart.total.amount),
        }
