"""Document-store implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.document_store import Transaction

COLLECTION = "products"


class JsonProductRepository(ProductRepository):

    def __init__(self, txn: Transaction) -> None:
        self._txn = txn

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        raw = self._docs().get(product_id)
        return self._to_domain(raw) if raw is not None else None

    def get_many(self, product_ids: list[str]) -> list[Product]:
        docs = self._docs()
        return [self._to_domain(docs[pid]) for pid in dict.fromkeys(product_ids) if pid in docs]

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._docs().values()]

    def save(self, product: Product) -> None:
        self._docs()[product.id] = self._to_raw(product)

    # --- Serialization --------------------------------------------------------

    def _docs(self) -> dict[str, dict]:
        return self._txn.collection(COLLECTION)

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "title": product.title,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "quantity": product.quantity,
            "seller_id": product.seller_id,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            title=raw["title"],
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            quantity=raw["quantity"],
            seller_id=raw["seller_id"],
        )
