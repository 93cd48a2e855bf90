"""CLI commands for the catalog (items, variants, stock)."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import default_container


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Base price (e.g. 3.50).")
@click.option("--stock", default=0, type=int, help="Initial stock level.")
def catalog_add(name: str, price: str, stock: int) -> None:
    """Add a new product to the catalog."""
    handler = default_container().add_product()

    try:
        item = handler.handle(name=name, price=price, stock=stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{item.id} '{item.name}' added at {item.base_price}")


@click.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive products.")
def catalog_list(include_inactive: bool) -> None:
    """List products with their variants."""
    handler = default_container().show_catalog()
    items = handler.handle(include_inactive=include_inactive)

    if not items:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10} {'Stock':>7} {'Active':>7}")
    click.echo("-" * 54)
    for item in items:
        click.echo(
            f"{item.id:<6} {item.name:<20} {'$' + item.base_price:>10} "
            f"{item.stock_quantity:>7} {'yes' if item.is_active else 'no':>7}"
        )
        for v in item.variants:
            click.echo(f"       - {v.id:<10} {v.category:<8} {v.name:<14} {v.price_modifier:>7}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New base price (e.g. 4.25).")
@click.option("--active/--inactive", default=None, help="Switch the product on or off.")
def catalog_update(product_id: str, price: str | None, active: bool | None) -> None:
    """Update a product's price or availability."""
    handler = default_container().update_product()

    try:
        item = handler.handle(product_id=product_id, new_price=price, active=active)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    state = "active" if item.is_active else "inactive"
    click.echo(f"Product #{item.id} now {item.base_price} ({state})")


@click.command("stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units in stock.")
def catalog_stock(product_id: str, quantity: int) -> None:
    """Set the stock level for a product."""
    handler = default_container().set_stock()

    try:
        handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for product #{product_id} set to {quantity}")


@click.command("variant-add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--id", "variant_id", required=True, help="New variant ID.")
@click.option("--name", required=True, help="Variant name (e.g. Large).")
@click.option("--category", required=True, help="Variant category (e.g. size, milk).")
@click.option("--modifier", default="0.00", help="Signed price modifier (e.g. 0.50, -0.25).")
def catalog_variant_add(
    product_id: str, variant_id: str, name: str, category: str, modifier: str
) -> None:
    """Attach a variant to a product."""
    handler = default_container().add_variant()

    try:
        variant = handler.handle(product_id, variant_id, name, category, modifier)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Variant '{variant.id}' added to product #{product_id}")
