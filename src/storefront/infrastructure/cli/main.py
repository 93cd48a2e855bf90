import click

from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from storefront.infrastructure.cli.catalog_commands import (
    catalog_add,
    catalog_list,
    catalog_stock,
    catalog_update,
    catalog_variant_add,
)
from storefront.infrastructure.cli.order_commands import (
    order_list,
    order_place,
    order_reorder,
    order_show,
    order_status,
)
from storefront.infrastructure.config import Settings
from storefront.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Storefront: catalog, cart and order placement."""
    configure_logging(Settings.from_env())


@cli.group()
def catalog() -> None:
    """Manage the catalog."""


@cli.group()
def cart() -> None:
    """Manage a user's cart."""


@cli.group()
def order() -> None:
    """Place and manage orders."""


# Register subcommands
catalog.add_command(catalog_add)
catalog.add_command(catalog_list)
catalog.add_command(catalog_stock)
catalog.add_command(catalog_update)
catalog.add_command(catalog_variant_add)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_list)
order.add_command(order_place)
order.add_command(order_reorder)
order.add_command(order_show)
order.add_command(order_status)
