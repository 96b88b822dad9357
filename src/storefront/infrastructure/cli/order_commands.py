"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from storefront.application.dto import AddressSpec, CheckoutRequest, OrderDTO, OrderItemSpec
from storefront.domain.exceptions import DomainException
from storefront.domain.model.actor import Actor
from storefront.domain.model.order import OrderStatus, PaymentMethod
from storefront.infrastructure.bootstrap import default_container
from storefront.infrastructure.cli.options import actor_options

_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse '1:3,2:5' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductID:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(OrderItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def _money(amount) -> str:
    return f"${amount:.2f}"


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Buyer:    {dto.buyer_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Payment:  {dto.payment_method} ({dto.payment_status})")
    if dto.tracking_number:
        click.echo(f"Tracking: {dto.tracking_number}")
    click.echo()

    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.title:<20} {item.quantity:>5} {_money(item.unit_price):>10} {_money(item.line_total):>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {_money(dto.total):>20}")
    click.echo()
    click.echo("History:")
    for entry in dto.history:
        click.echo(f"  {entry.changed_at}  {entry.status:<11} by {entry.changed_by}")


@click.command("create")
@click.option("--items", required=True, help="Items as 'ProductID:Qty,ProductID:Qty'.")
@click.option("--total", required=True, help="Total the buyer expects to pay.")
@click.option("--street", required=True, help="Shipping street address.")
@click.option("--city", required=True, help="Shipping city.")
@click.option("--phone", required=True, help="Contact phone.")
@click.option("--postal-code", default=None, help="Postal code (5-6 digits).")
@click.option(
    "--payment-method",
    type=click.Choice([m.value for m in PaymentMethod]),
    default=PaymentMethod.CASH_ON_DELIVERY.value,
    show_default=True,
)
@click.option("--card-number", default=None, help="Card number for card payments.")
@actor_options
def order_create(
    actor: Actor,
    items: str,
    total: str,
    street: str,
    city: str,
    phone: str,
    postal_code: str | None,
    payment_method: str,
    card_number: str | None,
) -> None:
    """Check out a new order."""
    request = CheckoutRequest(
        items=_parse_items(items),
        shipping_address=AddressSpec(street=street, city=city, phone=phone, postal_code=postal_code),
        total_amount=total,
        payment_method=payment_method,
        card_number=card_number,
    )

    try:
        dto = default_container().checkout().handle(actor, request)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} created  (status={dto.status})")
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
@actor_options
def order_show(actor: Actor, order_id: str) -> None:
    """Show details of an existing order."""
    try:
        dto = default_container().show_order().handle(actor, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in OrderStatus]),
    default=None,
    help="Only orders in this status.",
)
@click.option("--from", "date_from", type=_DATE, default=None, help="Placed on or after (YYYY-MM-DD).")
@click.option("--to", "date_to", type=_DATE, default=None, help="Placed on or before (YYYY-MM-DD).")
@actor_options
def order_list(
    actor: Actor,
    status: str | None,
    date_from: datetime | None,
    date_to: datetime | None,
) -> None:
    """List the orders visible to the acting user."""
    try:
        orders = default_container().list_orders().handle(
            actor,
            status=status,
            date_from=date_from.date() if date_from else None,
            date_to=date_to.date() if date_to else None,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<34} {'Status':<11} {'Buyer':<12} {'Total':>10}")
    click.echo("-" * 70)
    for o in orders:
        click.echo(f"{o.id:<34} {o.status:<11} {o.buyer_id:<12} {_money(o.total):>10}")


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
@actor_options
def order_cancel(actor: Actor, order_id: str) -> None:
    """Cancel an order (returns its units to stock)."""
    try:
        default_container().cancel_order().handle(actor, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled.")


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID to update.")
@click.option("--to", "status", required=True, help="New status.")
@actor_options
def order_status(actor: Actor, order_id: str, status: str) -> None:
    """Move an order to a new status (sellers: Processing -> Shipped only)."""
    try:
        dto = default_container().update_order_status().handle(actor, order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {dto.status}.")


@click.command("track")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--number", "tracking_number", required=True, help="Carrier tracking number.")
@actor_options
def order_track(actor: Actor, order_id: str, tracking_number: str) -> None:
    """Attach a tracking number to an order."""
    try:
        default_container().add_tracking_number().handle(actor, order_id, tracking_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Tracking number {tracking_number} added to order #{order_id}.")


@click.command("stats")
@click.option("--mine", is_flag=True, help="Count the orders you placed, whatever your role.")
@actor_options
def order_stats(actor: Actor, mine: bool) -> None:
    """Order counts per status for the acting user."""
    handler = default_container().order_stats()
    stats = handler.handle_mine(actor) if mine else handler.handle(actor)

    click.echo(f"Total orders: {stats.total}")
    if not stats.by_status:
        return
    click.echo(f"  {'Status':<11} {'Count':>6} {'Amount':>12}")
    for status, totals in stats.by_status.items():
        click.echo(f"  {status:<11} {totals.count:>6} {_money(totals.amount):>12}")
