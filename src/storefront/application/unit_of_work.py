"""Unit of Work: the transaction boundary for application handlers.

Every handler that writes opens exactly one unit of work, does all its
reads and writes through the repositories it exposes, and calls
``commit()``.  Leaving the ``with`` block without a commit (including via
an exception) rolls everything back, so stock decrements, order inserts
and cart clears become visible together or not at all.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository


class UnitOfWork(ABC):
    products: ProductRepository
    orders: OrderRepository
    carts: CartRepository

    def __enter__(self) -> UnitOfWork:
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self.close()

    @abstractmethod
    def begin(self) -> None:
        """Open the transaction and bind the repositories to it."""

    @abstractmethod
    def commit(self) -> None:
        """Make every write since ``begin()`` durable and visible."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted writes.  A no-op after ``commit()``."""

    def close(self) -> None:
        """Release whatever ``begin()`` acquired."""


UnitOfWorkFactory = Callable[[], UnitOfWork]
