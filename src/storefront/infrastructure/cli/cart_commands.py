"""CLI commands for a user's cart."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import default_container


@click.command("show")
@click.option("--user", "user_id", required=True, help="User ID.")
def cart_show(user_id: str) -> None:
    """Show the cart with current prices."""
    dto = default_container().show_cart().handle(user_id)

    if not dto.items:
        click.echo("Cart is empty.")
        return

    click.echo(f"  {'#':<4} {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*52}")
    for line in dto.items:
        if not line.available:
            click.echo(f"  {line.id:<4} {line.product_name:<20} {line.quantity:>5} {'unavailable':>21}")
            continue
        click.echo(
            f"  {line.id:<4} {line.product_name:<20} {line.quantity:>5} "
            f"{'$' + line.unit_price:>10} {'$' + line.line_total:>10}"
        )
        if line.variant_ids:
            click.echo(f"       with {', '.join(line.variant_ids)}")
    click.echo(f"  {'-'*52}")
    click.echo(f"  {'Subtotal':<32} {'$' + dto.subtotal:>20}")
    click.echo(f"  {'Tax':<32} {'$' + dto.tax:>20}")
    click.echo(f"  {'Total':<32} {'$' + dto.total:>20}")


@click.command("add")
@click.option("--user", "user_id", required=True, help="User ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, type=int, help="Quantity to add.")
@click.option("--variant", "variant_ids", multiple=True, help="Variant ID (repeatable).")
def cart_add(user_id: str, product_id: str, quantity: int, variant_ids: tuple[str, ...]) -> None:
    """Add a product (with optional variants) to the cart."""
    try:
        line = default_container().add_to_cart().handle(
            user_id, product_id, quantity, variant_ids
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart line #{line.id}: product #{line.product_id} x{line.quantity}")


@click.command("update")
@click.option("--user", "user_id", required=True, help="User ID.")
@click.option("--line", "line_id", required=True, type=int, help="Cart line ID.")
@click.option("--quantity", required=True, type=int, help="New quantity.")
def cart_update(user_id: str, line_id: int, quantity: int) -> None:
    """Change the quantity of a cart line."""
    try:
        default_container().update_cart_item().handle(user_id, line_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart line #{line_id} set to {quantity}")


@click.command("remove")
@click.option("--user", "user_id", required=True, help="User ID.")
@click.option("--line", "line_id", required=True, type=int, help="Cart line ID.")
def cart_remove(user_id: str, line_id: int) -> None:
    """Remove a line from the cart."""
    try:
        default_container().remove_cart_item().handle(user_id, line_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart line #{line_id} removed")


@click.command("clear")
@click.option("--user", "user_id", required=True, help="User ID.")
def cart_clear(user_id: str) -> None:
    """Empty the cart."""
    default_container().clear_cart().handle(user_id)
    click.echo("Cart cleared")
