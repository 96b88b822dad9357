"""Order aggregate: the core of the domain.

The Order is an aggregate root that owns its line items and its status
history.  The state machine lives here; *who* may drive it lives in
``storefront.domain.service.transition_authority``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ConflictError, ValidationError
from storefront.domain.model.value_objects import CardNumber, Money, Quantity, ShippingAddress


class OrderStatus(Enum):
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    @staticmethod
    def parse(value: str) -> OrderStatus:
        try:
            return OrderStatus(value)
        except ValueError as exc:
            raise ValidationError(f"Invalid order status: {value!r}") from exc


class PaymentMethod(Enum):
    CREDIT_CARD = "Credit Card"
    CASH_ON_DELIVERY = "Cash on Delivery"
    BANK_TRANSFER = "Bank Transfer"

    @property
    def requires_card(self) -> bool:
        return self is PaymentMethod.CREDIT_CARD

    @staticmethod
    def parse(value: str) -> PaymentMethod:
        try:
            return PaymentMethod(value)
        except ValueError as exc:
            raise ValidationError(f"Invalid payment method: {value!r}") from exc


class PaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    REFUNDED = "Refunded"


CANCELLABLE_STATUSES = (OrderStatus.PROCESSING, OrderStatus.SHIPPED)
MAX_LINE_ITEMS = 20


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StatusChange:
    """One entry of the append-only status history."""

    status: OrderStatus
    changed_at: datetime
    changed_by: str


@dataclass(frozen=True)
class OrderLineItem:
    """Captures product, seller and price at order-creation time.

    The ``unit_price`` never changes afterwards (price lock).
    """

    product_id: str
    product_title: str
    seller_id: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for purchase orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: str | None
    buyer_id: str
    items: list[OrderLineItem]
    shipping_address: ShippingAddress
    total: Money
    payment_method: PaymentMethod
    payment_status: PaymentStatus = PaymentStatus.PENDING
    status: OrderStatus = OrderStatus.PROCESSING
    history: list[StatusChange] = field(default_factory=list)
    tracking_number: str | None = None
    card_last4: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        buyer_id: str,
        items: list[OrderLineItem],
        shipping_address: ShippingAddress,
        payment_method: PaymentMethod,
        card: CardNumber | None = None,
    ) -> Order:
        """Create a new order in ``Processing`` with its first history entry."""
        if not buyer_id:
            raise ValidationError("Buyer is required")

        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        if payment_method.requires_card and card is None:
            raise ValidationError("Invalid card number. Must be 13-19 digits.")

        total = Money.zero()
        for item in items:
            total = total + item.line_total

        created_at = _now()
        return Order(
            id=None,
            buyer_id=buyer_id,
            items=list(items),
            shipping_address=shipping_address,
            total=total,
            payment_method=payment_method,
            # Card numbers are format-checked only; nothing is charged.
            payment_status=(
                PaymentStatus.COMPLETED if payment_method.requires_card else PaymentStatus.PENDING
            ),
            status=OrderStatus.PROCESSING,
            history=[StatusChange(OrderStatus.PROCESSING, created_at, buyer_id)],
            card_last4=card.last4 if payment_method.requires_card and card else None,
            created_at=created_at,
            updated_at=created_at,
        )

    # --- State transitions ----------------------------------------------------

    def transition_to(self, new_status: OrderStatus, changed_by: str) -> None:
        """Move to *new_status* and record it in the history.

        Terminal states are immutable, and writing the current status again
        is a conflict rather than a silent no-op.
        """
        if self.status.is_terminal:
            raise ConflictError(
                f"Order is already {self.status.value}; no further changes allowed",
                status=self.status.value,
            )
        if new_status == self.status:
            raise ConflictError(
                f"Order is already {self.status.value}",
                status=self.status.value,
            )
        changed_at = _now()
        self.status = new_status
        self.history.append(StatusChange(new_status, changed_at, changed_by))
        self.updated_at = changed_at

    def cancel(self, changed_by: str) -> None:
        """Transition Processing|Shipped -> Cancelled.

        Stock release must happen in the same transaction, coordinated by
        the application handler through the inventory ledger.
        """
        if self.status not in CANCELLABLE_STATUSES:
            raise ConflictError(
                f"Order cannot be cancelled in {self.status.value} status",
                status=self.status.value,
            )
        self.transition_to(OrderStatus.CANCELLED, changed_by)

    def set_tracking_number(self, tracking_number: str) -> None:
        if not tracking_number or not tracking_number.strip():
            raise ValidationError("Tracking number is required")
        if self.status == OrderStatus.CANCELLED:
            raise ConflictError("Cannot track a cancelled order", status=self.status.value)
        self.tracking_number = tracking_number.strip()
        self.updated_at = _now()

    # --- Queries --------------------------------------------------------------

    @property
    def seller_ids(self) -> list[str]:
        """Distinct sellers represented in the order, in line-item order."""
        seen: list[str] = []
        for item in self.items:
            if item.seller_id not in seen:
                seen.append(item.seller_id)
        return seen

    def involves_seller(self, seller_id: str) -> bool:
        return any(item.seller_id == seller_id for item in self.items)
