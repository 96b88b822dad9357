import click

from storefront.infrastructure.cli.cart_commands import cart_add, cart_show
from storefront.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_list,
    order_show,
    order_stats,
    order_status,
    order_track,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_restock,
)
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Storefront: checkout and order management"""
    configure_logging(get_settings())


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def cart() -> None:
    """Manage a buyer's cart."""


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
def serve(host: str, port: int) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "storefront.infrastructure.api.app:create_app",
        factory=True,
        host=host,
        port=port,
    )


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_stats)
order.add_command(order_status)
order.add_command(order_track)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_restock)
cart.add_command(cart_add)
cart.add_command(cart_show)
