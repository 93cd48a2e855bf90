"""CLI commands for placing and managing orders."""

from __future__ import annotations

import click

from storefront.application.dto import OrderDTO, OrderSummaryDTO
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import default_container


@click.command("place")
@click.option("--user", "user_id", required=True, help="User ID.")
@click.option(
    "--payment",
    "payment_method",
    required=True,
    type=click.Choice(["card", "cash"]),
    help="Payment method.",
)
@click.option("--card", "card_number", default=None, help="Card number (card payments).")
@click.option("--notes", default=None, help="Free-text notes for the order.")
def order_place(
    user_id: str, payment_method: str, card_number: str | None, notes: str | None
) -> None:
    """Place an order from the user's current cart."""
    details = {"card_number": card_number} if card_number else None

    try:
        placed = default_container().place_order().handle(
            user_id=user_id,
            payment_method=payment_method,
            payment_details=details,
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Order #{placed.order_id} placed  "
        f"(total=${placed.total_amount}, payment={placed.payment_status})"
    )


def _display_order(dto: OrderDTO) -> None:
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Payment:  {dto.payment_method} ({dto.payment_status})")
    click.echo(f"Created:  {dto.created_at}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo()

    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} "
            f"{'$' + item.unit_price:>10} {'$' + item.line_total:>10}"
        )
        if item.variant_ids:
            click.echo(f"    with {', '.join(item.variant_ids)}")
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Subtotal':<27} {'$' + dto.subtotal:>20}")
    click.echo(f"  {'Tax':<27} {'$' + dto.tax_amount:>20}")
    click.echo(f"  {'Order Total':<27} {'$' + dto.total_amount:>20}")


def _display_summaries(orders: list[OrderSummaryDTO]) -> None:
    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'User':<12} {'Status':<12} {'Payment':<12} {'Items':>6} {'Total':>10}  Created")
    click.echo("-" * 82)
    for o in orders:
        click.echo(
            f"{o.id:<6} {o.user_id:<12} {o.status:<12} {o.payment_status:<12} "
            f"{o.item_count:>6} {'$' + o.total_amount:>10}  {o.created_at}"
        )


@click.command("show")
@click.option("--user", "user_id", required=True, help="User ID (owner of the order).")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(user_id: str, order_id: int) -> None:
    """Show details of an existing order."""
    try:
        dto = default_container().show_order().handle(user_id, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--user", "user_id", default=None, help="Only this user's orders.")
@click.option(
    "--status",
    default=None,
    type=click.Choice(["pending", "processing", "completed", "cancelled"]),
    help="Filter by status (all users only).",
)
@click.option("--limit", default=10, type=int, help="Page size.")
@click.option("--offset", default=0, type=int, help="Rows to skip.")
def order_list(user_id: str | None, status: str | None, limit: int, offset: int) -> None:
    """List orders, newest first."""
    handler = default_container().list_orders()

    try:
        if user_id:
            orders = handler.for_user(user_id, limit=limit, offset=offset)
        else:
            orders = handler.all(status=status, limit=limit, offset=offset)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_summaries(orders)


@click.command("reorder")
@click.option("--user", "user_id", required=True, help="User ID (owner of the order).")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to copy into the cart.")
def order_reorder(user_id: str, order_id: int) -> None:
    """Copy a past order's lines back into the cart."""
    try:
        lines = default_container().reorder().handle(user_id, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("Nothing added; items are out of stock or already at the stock limit.")
        return
    click.echo(f"{len(lines)} line(s) from order #{order_id} added to the cart.")


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--set",
    "status",
    required=True,
    type=click.Choice(["pending", "processing", "completed", "cancelled"]),
    help="New status.",
)
def order_status(order_id: int, status: str) -> None:
    """Change an order's status (admin)."""
    try:
        default_container().update_order_status().handle(order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {status}.")
