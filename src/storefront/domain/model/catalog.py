"""Catalog aggregate: items and their variants.

Catalog items live independently of carts and orders. Prices change and
items are switched on and off; carts and orders resolve prices at the
moment they need them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class Variant:
    """A selectable option on a catalog item (size, milk, extra shot...).

    ``category`` is an open enumeration; the domain does not interpret it.
    """

    id: str
    product_id: str
    name: str
    category: str
    price_modifier: Decimal = Decimal("0.00")
    is_active: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.price_modifier, Decimal):
            raise ValidationError(
                f"Price modifier must be a Decimal, got {type(self.price_modifier).__name__}"
            )

    def belongs_to(self, product_id: str) -> bool:
        return self.product_id == product_id


@dataclass
class CatalogItem:
    """A product in the catalog.

    This is an aggregate root. Kept as a mutable dataclass because price
    updates and stock movements are legitimate mutations on it.

    Invariants:
    - ``stock_quantity`` is never negative
    """

    id: str
    name: str
    base_price: Money
    stock_quantity: int = 0
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.stock_quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")

    def update_price(self, new_price: Money) -> None:
        """Change the base price.

        Existing orders are unaffected; they captured resolved unit
        prices at placement time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.base_price = new_price

    def activate(self) -> None:
        self.is_active = True

    def deactivate(self) -> None:
        self.is_active = False

    def has_stock(self, quantity: int) -> bool:
        return self.stock_quantity >= quantity

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        self.stock_quantity = quantity

    def take_stock(self, quantity: int) -> None:
        """Decrement stock for a placed order.

        Callers must hold the item's lock; see ``StockLedger``.
        """
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.stock_quantity:
            raise ValidationError(
                f"Insufficient stock for {self.name} "
                f"(need {quantity}, have {self.stock_quantity} available)"
            )
        self.stock_quantity -= quantity

    def return_stock(self, quantity: int) -> None:
        """Put back stock taken by ``take_stock`` (rollback path)."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        self.stock_quantity += quantity
