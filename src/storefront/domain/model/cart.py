"""Cart aggregate: one per buyer."""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money

MAX_CART_LINES = 20
MAX_LINE_QUANTITY = 10


@dataclass
class CartItem:
    product_id: str
    quantity: int
    price: Money  # price at the moment the item was added

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity


@dataclass
class Cart:
    """Shopping cart owned by exactly one buyer.

    Checkout empties the cart instead of deleting it, so the buyer keeps
    the same cart document for the next purchase.
    """

    buyer_id: str
    items: list[CartItem] = field(default_factory=list)

    def add(self, product_id: str, quantity: int, price: Money) -> None:
        if quantity < 1 or quantity > MAX_LINE_QUANTITY:
            raise ValidationError(
                f"Quantity must be between 1 and {MAX_LINE_QUANTITY}"
            )
        for item in self.items:
            if item.product_id == product_id:
                merged = item.quantity + quantity
                if merged > MAX_LINE_QUANTITY:
                    raise ValidationError(
                        f"Cannot hold more than {MAX_LINE_QUANTITY} units of one product"
                    )
                item.quantity = merged
                item.price = price
                return
        if len(self.items) >= MAX_CART_LINES:
            raise ValidationError(f"Maximum {MAX_CART_LINES} items per cart")
        self.items.append(CartItem(product_id=product_id, quantity=quantity, price=price))

    def clear(self) -> None:
        self.items = []

    @property
    def total(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def is_empty(self) -> bool:
        return not self.items
