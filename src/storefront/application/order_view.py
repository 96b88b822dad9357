"""Read-side projection of an Order.

Kept apart from the aggregate: the aggregate stores what was frozen at
checkout, the view decorates it with whatever the live catalog says now.
A product deleted since checkout falls back to the title captured on
the line item.
"""

from __future__ import annotations

from collections.abc import Mapping

from storefront.application.dto import AddressSpec, OrderDTO, OrderLineItemDTO, StatusChangeDTO
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product

DELETED_PRODUCT_TITLE = "Deleted Product"


def to_order_dto(order: Order, catalog: Mapping[str, Product] | None = None) -> OrderDTO:
    catalog = catalog or {}
    items = []
    for item in order.items:
        live = catalog.get(item.product_id)
        title = live.title if live is not None else (item.product_title or DELETED_PRODUCT_TITLE)
        items.append(
            OrderLineItemDTO(
                product_id=item.product_id,
                title=title,
                seller_id=item.seller_id,
                quantity=item.quantity.value,
                unit_price=item.unit_price.amount,
                line_total=item.line_total.amount,
            )
        )
    address = order.shipping_address
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        buyer_id=order.buyer_id,
        status=order.status.value,
        items=items,
        total=order.total.amount,
        payment_method=order.payment_method.value,
        payment_status=order.payment_status.value,
        shipping_address=AddressSpec(
            street=address.street,
            city=address.city,
            phone=address.phone,
            postal_code=address.postal_code,
        ),
        history=[
            StatusChangeDTO(
                status=entry.status.value,
                changed_at=entry.changed_at.isoformat(),
                changed_by=entry.changed_by,
            )
            for entry in order.history
        ],
        tracking_number=order.tracking_number,
        card_last4=order.card_last4,
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def catalog_for(products: list[Product]) -> dict[str, Product]:
    return {p.id: p for p in products}
