"""Document-store implementation of OrderRepository."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from storefront.domain.model.order import (
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    StatusChange,
)
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.document_store import Transaction

COLLECTION = "orders"


class JsonOrderRepository(OrderRepository):

    def __init__(self, txn: Transaction) -> None:
        self._txn = txn

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> str:
        return uuid.uuid4().hex

    def get_by_id(self, order_id: str) -> Order | None:
        raw = self._docs().get(order_id)
        return self._to_domain(raw) if raw is not None else None

    def list_all(self) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._docs().values()]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self.next_id()
        self._docs()[order.id] = self._to_raw(order)

    # --- Serialization --------------------------------------------------------

    def _docs(self) -> dict[str, dict]:
        return self._txn.collection(COLLECTION)

    @staticmethod
    def _to_raw(order: Order) -> dict:
        address = order.shipping_address
        return {
            "id": order.id,
            "buyer_id": order.buyer_id,
            "status": order.status.value,
            "total": str(order.total.amount),
            "currency": order.total.currency,
            "payment_method": order.payment_method.value,
            "payment_status": order.payment_status.value,
            "card_last4": order.card_last4,
            "tracking_number": order.tracking_number,
            "shipping_address": {
                "street": address.street,
                "city": address.city,
                "phone": address.phone,
                "postal_code": address.postal_code,
            },
            "items": [
                {
                    "product_id": item.product_id,
                    "product_title": item.product_title,
                    "seller_id": item.seller_id,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                }
                for item in order.items
            ],
            "history": [
                {
                    "status": entry.status.value,
                    "changed_at": entry.changed_at.isoformat(),
                    "changed_by": entry.changed_by,
                }
                for entry in order.history
            ],
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderLineItem(
                product_id=i["product_id"],
                product_title=i["product_title"],
                seller_id=i["seller_id"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
            )
            for i in raw["items"]
        ]
        history = [
            StatusChange(
                status=OrderStatus(h["status"]),
                changed_at=datetime.fromisoformat(h["changed_at"]),
                changed_by=h["changed_by"],
            )
            for h in raw["history"]
        ]
        return Order(
            id=raw["id"],
            buyer_id=raw["buyer_id"],
            items=items,
            shipping_address=ShippingAddress(**raw["shipping_address"]),
            total=Money(Decimal(raw["total"]), raw.get("currency", "USD")),
            payment_method=PaymentMethod(raw["payment_method"]),
            payment_status=PaymentStatus(raw["payment_status"]),
            status=OrderStatus(raw["status"]),
            history=history,
            tracking_number=raw.get("tracking_number"),
            card_last4=raw.get("card_last4"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
