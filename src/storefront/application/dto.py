"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI/HTTP layers and the application layer
without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the buyer asked for (product ID + quantity)."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class AddressSpec:
    street: str
    city: str
    phone: str
    postal_code: str | None = None


@dataclass(frozen=True)
class CheckoutRequest:
    items: list[OrderItemSpec]
    shipping_address: AddressSpec
    total_amount: Decimal | float | str
    payment_method: str = "Cash on Delivery"
    card_number: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    title: str
    seller_id: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class StatusChangeDTO:
    status: str
    changed_at: str
    changed_by: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    buyer_id: str
    status: str
    items: list[OrderLineItemDTO]
    total: Decimal
    payment_method: str
    payment_status: str
    shipping_address: AddressSpec
    history: list[StatusChangeDTO]
    tracking_number: str | None
    card_last4: str | None
    created_at: str


@dataclass(frozen=True)
class CartItemDTO:
    product_id: str
    quantity: int
    price: Decimal


@dataclass(frozen=True)
class CartDTO:
    buyer_id: str
    items: list[CartItemDTO]
    total: Decimal


@dataclass(frozen=True)
class StatusTotalsDTO:
    count: int
    amount: Decimal


@dataclass(frozen=True)
class OrderStatsDTO:
    """Counts over the orders in scope, plus a per-status breakdown.

    ``amount`` is what the orders are worth to whoever asked: a seller
    sees only their own line totals, everyone else the order totals.
    """

    total: int
    completed: int
    pending: int
    cancelled: int
    by_status: dict[str, StatusTotalsDTO] = field(default_factory=dict)


@dataclass(frozen=True)
class SellerDashboardDTO:
    total_orders: int
    completed_orders: int
    total_sales: Decimal


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderDTO]
    total: int
    page: int
    page_size: int
