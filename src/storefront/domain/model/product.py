"""Product aggregate.

Products live independently of orders.  The catalog owns creation and
pricing; the checkout and cancellation paths only ever touch ``quantity``
through ``reserve()`` and ``release()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Invariants:
    - ``quantity`` is never negative
    - a decrement only happens through ``reserve()``, which checks first
    """

    id: str
    title: str
    price: Money
    quantity: int
    seller_id: str

    def __post_init__(self) -> None:
        if not isinstance(self.quantity, int) or self.quantity < 0:
            raise ValidationError(
                f"Product quantity must be a non-negative integer, got {self.quantity!r}"
            )

    def has_available(self, quantity: int) -> bool:
        return self.quantity >= quantity

    def reserve(self, quantity: int) -> None:
        """Take *quantity* units out of stock for an order."""
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if not self.has_available(quantity):
            raise InsufficientStockError(
                product_id=self.id,
                title=self.title,
                requested=quantity,
                available=self.quantity,
            )
        self.quantity -= quantity

    def release(self, quantity: int) -> None:
        """Return *quantity* units to stock (e.g. on order cancellation)."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        self.quantity += quantity

    def restock(self, quantity: int) -> None:
        """Set the on-hand quantity (catalog administration, not checkout)."""
        if not isinstance(quantity, int) or quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        self.quantity = quantity
