"""Application service: Checkout use case.

Turns a buyer's item list into an order inside one unit of work:

1. Validate the card number when paying by card.
2. Load every referenced product; all of them must exist.
3. Check availability for every line before touching any stock.
4. Price the order from the catalog, never from the client, and compare
   with the total the client claims (0.01 tolerance).
5. Reserve stock, persist the order, empty the buyer's cart.
6. Commit, then fan out notifications outside the transaction.

Any failure before step 6 raises out of the ``with`` block and the unit
of work rolls back, so nothing is left half-written.
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from storefront.application.dto import CheckoutRequest, OrderDTO, OrderItemSpec
from storefront.application.notifications import OrderNotifications
from storefront.application.order_view import catalog_for, to_order_dto
from storefront.application.unit_of_work import UnitOfWorkFactory
from storefront.domain.exceptions import EntityNotFoundError, InsufficientStockError, ValidationError
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import Order, OrderLineItem, PaymentMethod
from storefront.domain.model.value_objects import CardNumber, Money, Quantity, ShippingAddress
from storefront.domain.service.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)

TOTAL_TOLERANCE = Decimal("0.01")


class CheckoutHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        notifications: OrderNotifications,
        total_tolerance: Decimal = TOTAL_TOLERANCE,
    ) -> None:
        self._uow_factory = uow_factory
        self._notifications = notifications
        self._total_tolerance = total_tolerance

    def handle(self, actor: Actor, request: CheckoutRequest) -> OrderDTO:
        payment_method = PaymentMethod.parse(request.payment_method)
        requested = self._requested_quantities(request.items)
        address = ShippingAddress(
            street=request.shipping_address.street,
            city=request.shipping_address.city,
            phone=request.shipping_address.phone,
            postal_code=request.shipping_address.postal_code or None,
        )
        claimed_total = Money.of(request.total_amount)

        with self._uow_factory() as uow:
            card = None
            if payment_method.requires_card:
                card = CardNumber(request.card_number or "")

            products = uow.products.get_many(list(requested))
            catalog = catalog_for(products)
            missing = [pid for pid in requested if pid not in catalog]
            if missing:
                raise EntityNotFoundError(
                    "Some products not found.", product_ids=missing
                )

            calculated_total = Money.zero()
            line_items: list[OrderLineItem] = []
            for product_id, quantity in requested.items():
                product = catalog[product_id]
                if not product.has_available(quantity):
                    raise InsufficientStockError(
                        product_id=product.id,
                        title=product.title,
                        requested=quantity,
                        available=product.quantity,
                    )
                calculated_total = calculated_total + product.price * quantity
                line_items.append(
                    OrderLineItem(
                        product_id=product.id,
                        product_title=product.title,
                        seller_id=product.seller_id,
                        quantity=Quantity(quantity),
                        unit_price=product.price,  # <-- price snapshot
                    )
                )

            if calculated_total.differs_from(claimed_total, self._total_tolerance):
                raise ValidationError(
                    "Total amount mismatch.",
                    calculated=str(calculated_total.amount),
                    received=str(claimed_total.amount),
                )

            ledger = InventoryLedger(uow.products)
            reserved = [
                ledger.reserve(line.product_id, line.quantity.value) for line in line_items
            ]

            order = Order.create(
                buyer_id=actor.id,
                items=line_items,
                shipping_address=address,
                payment_method=payment_method,
                card=card,
            )
            uow.orders.save(order)

            cart = uow.carts.get_for_buyer(actor.id)
            if cart is not None:
                cart.clear()
                uow.carts.save(cart)

            uow.commit()

        logger.info(
            "order_created",
            order_id=order.id,
            buyer_id=actor.id,
            total=str(order.total.amount),
            lines=len(order.items),
        )
        self._notifications.order_placed(order, reserved)
        return to_order_dto(order, catalog)

    @staticmethod
    def _requested_quantities(items: list[OrderItemSpec]) -> dict[str, int]:
        """Collapse the item list to one quantity per product, in request order."""
        if not items:
            raise ValidationError("Order must contain at least one item")
        requested: dict[str, int] = {}
        for spec in items:
            if not spec.product_id:
                raise ValidationError("Invalid product ID")
            Quantity(spec.quantity)
            requested[spec.product_id] = requested.get(spec.product_id, 0) + spec.quantity
        return requested
