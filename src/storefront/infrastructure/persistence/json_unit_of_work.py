"""UnitOfWork over the JSON document store."""

from __future__ import annotations

from storefront.application.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.document_store import DocumentStore, Transaction
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_repository import JsonProductRepository


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._txn: Transaction | None = None

    def begin(self) -> None:
        self._txn = self._store.begin()
        self.products = JsonProductRepository(self._txn)
        self.orders = JsonOrderRepository(self._txn)
        self.carts = JsonCartRepository(self._txn)

    def commit(self) -> None:
        if self._txn is None:
            raise RuntimeError("Unit of work has not begun")
        self._txn.commit()

    def rollback(self) -> None:
        if self._txn is not None:
            self._txn.abort()

    def close(self) -> None:
        self._txn = None
