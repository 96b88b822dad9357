"""CLI commands for the buyer's cart."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.actor import Actor
from storefront.infrastructure.bootstrap import default_container
from storefront.infrastructure.cli.options import actor_options


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, type=int, help="Units to add (1-10).")
@actor_options
def cart_add(actor: Actor, product_id: str, quantity: int) -> None:
    """Add a product to the cart."""
    handler = default_container().add_to_cart()

    try:
        cart = handler.handle(actor, product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart now holds {len(cart.items)} item(s), total ${cart.total:.2f}")


@click.command("show")
@actor_options
def cart_show(actor: Actor) -> None:
    """Show the cart."""
    cart = default_container().show_cart().handle(actor)

    if not cart.items:
        click.echo("Cart is empty.")
        return

    click.echo(f"  {'Product':<10} {'Qty':>5} {'Price':>10}")
    click.echo(f"  {'-'*27}")
    for item in cart.items:
        click.echo(f"  {item.product_id:<10} {item.quantity:>5} {'$' + format(item.price, '.2f'):>10}")
    click.echo(f"  {'-'*27}")
    click.echo(f"  {'Total':<16} {'$' + format(cart.total, '.2f'):>10}")
