"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.actor import Actor
from storefront.infrastructure.bootstrap import default_container
from storefront.infrastructure.cli.options import actor_options


@click.command("add")
@click.option("--title", required=True, help="Product title.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--quantity", default=0, type=int, help="Units in stock.")
@click.option("--seller", required=True, help="Seller ID owning the product.")
def product_add(title: str, price: str, quantity: int, seller: str) -> None:
    """Add a new product to the catalog."""
    handler = default_container().add_product()

    try:
        product = handler.handle(seller_id=seller, title=title, price=price, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.title}' added at {product.price} ({product.quantity} in stock)")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    container = default_container()
    with container.unit_of_work() as uow:
        products = uow.products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Title':<20} {'Price':>10} {'Stock':>6} {'Seller':<12}")
    click.echo("-" * 58)
    for p in products:
        click.echo(f"{p.id:<6} {p.title:<20} {str(p.price):>10} {p.quantity:>6} {p.seller_id:<12}")


@click.command("restock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New stock level.")
@actor_options
def product_restock(actor: Actor, product_id: str, quantity: int) -> None:
    """Set the stock level of a product."""
    handler = default_container().restock_product()

    try:
        product = handler.handle(actor, product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{product.title}' set to {product.quantity}")
