"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI / HTTP adapters and the application
layer without exposing domain internals.  Amounts are decimal strings
with two places ("12.50"); adapters add currency symbols if they want.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.cart import CartLine
from storefront.domain.model.order import Order, OrderLine
from storefront.domain.model.value_objects import Money


def format_amount(money: Money) -> str:
    return f"{money.rounded().amount:.2f}"


# --- Orders -------------------------------------------------------------------


@dataclass(frozen=True)
class PlacedOrderDTO:
    """Output of a successful order placement."""

    order_id: int
    total_amount: str
    payment_status: str


@dataclass(frozen=True)
class OrderLineDTO:
    product_id: str
    product_name: str
    quantity: int
    unit_price: str
    line_total: str
    variant_ids: list[str]

    @staticmethod
    def from_line(line: OrderLine) -> OrderLineDTO:
        return OrderLineDTO(
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=line.quantity.value,
            unit_price=format_amount(line.unit_price),
            line_total=format_amount(line.line_total),
            variant_ids=line.customization.to_list(),
        )


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order with its lines."""

    id: int
    user_id: str
    status: str
    payment_method: str
    payment_status: str
    items: list[OrderLineDTO]
    subtotal: str
    tax_amount: str
    total_amount: str
    notes: str | None
    created_at: str

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            user_id=order.user_id,
            status=order.status.value,
            payment_method=order.payment_method.value,
            payment_status=order.payment_status.value,
            items=[OrderLineDTO.from_line(line) for line in order.lines],
            subtotal=format_amount(order.subtotal),
            tax_amount=format_amount(order.tax_amount),
            total_amount=format_amount(order.total_amount),
            notes=order.notes,
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class OrderSummaryDTO:
    """Output: one row of an order listing."""

    id: int
    user_id: str
    status: str
    payment_status: str
    total_amount: str
    item_count: int
    created_at: str

    @staticmethod
    def from_order(order: Order) -> OrderSummaryDTO:
        return OrderSummaryDTO(
            id=order.id,  # type: ignore[arg-type]
            user_id=order.user_id,
            status=order.status.value,
            payment_status=order.payment_status.value,
            total_amount=format_amount(order.total_amount),
            item_count=order.item_count,
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


# --- Cart ---------------------------------------------------------------------


@dataclass(frozen=True)
class CartLineDTO:
    id: int
    product_id: str
    product_name: str
    quantity: int
    variant_ids: list[str]
    unit_price: str | None  # None when the line can no longer be priced
    line_total: str | None
    available: bool

    @staticmethod
    def unavailable(line: CartLine, product_name: str) -> CartLineDTO:
        return CartLineDTO(
            id=line.id,
            product_id=line.product_id,
            product_name=product_name,
            quantity=line.quantity.value,
            variant_ids=line.customization.to_list(),
            unit_price=None,
            line_total=None,
            available=False,
        )


@dataclass(frozen=True)
class CartDTO:
    items: list[CartLineDTO]
    subtotal: str
    tax: str
    total: str
    item_count: int


# --- Catalog ------------------------------------------------------------------


@dataclass(frozen=True)
class VariantDTO:
    id: str
    name: str
    category: str
    price_modifier: str
    is_active: bool


@dataclass(frozen=True)
class CatalogItemDTO:
    id: str
    name: str
    base_price: str
    stock_quantity: int
    is_active: bool
    variants: list[VariantDTO]
