"""Cart aggregate — one per user.

Lines are immutable; every mutation on the cart replaces them, so a
``CartSnapshot`` taken at the start of checkout can never be changed by
later cart edits.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.value_objects import Customization, Quantity


@dataclass(frozen=True)
class CartLine:
    id: int
    product_id: str
    quantity: Quantity
    customization: Customization = Customization()

    def matches(self, product_id: str, customization: Customization) -> bool:
        return self.product_id == product_id and self.customization == customization


@dataclass(frozen=True)
class CartSnapshot:
    """The user's cart lines at the moment order placement began."""

    user_id: str
    lines: tuple[CartLine, ...]

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity.value for line in self.lines)


@dataclass
class Cart:
    """Aggregate root for a user's cart.

    Adding a product with a customization equal to an existing line's
    merges into that line instead of creating a duplicate.
    """

    user_id: str
    lines: list[CartLine] = field(default_factory=list)

    def find(self, product_id: str, customization: Customization) -> CartLine | None:
        for line in self.lines:
            if line.matches(product_id, customization):
                return line
        return None

    def get_line(self, line_id: int) -> CartLine:
        for line in self.lines:
            if line.id == line_id:
                return line
        raise EntityNotFoundError(f"Cart item #{line_id} not found")

    def add(
        self,
        product_id: str,
        quantity: Quantity,
        customization: Customization = Customization(),
    ) -> CartLine:
        existing = self.find(product_id, customization)
        if existing is not None:
            merged = replace(existing, quantity=existing.quantity + quantity)
            self._replace(merged)
            return merged

        line = CartLine(
            id=self._next_line_id(),
            product_id=product_id,
            quantity=quantity,
            customization=customization,
        )
        self.lines.append(line)
        return line

    def update_quantity(self, line_id: int, quantity: Quantity) -> CartLine:
        updated = replace(self.get_line(line_id), quantity=quantity)
        self._replace(updated)
        return updated

    def remove(self, line_id: int) -> None:
        line = self.get_line(line_id)
        self.lines = [l for l in self.lines if l.id != line.id]

    def clear(self) -> None:
        self.lines = []

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(user_id=self.user_id, lines=tuple(self.lines))

    @property
    def is_empty(self) -> bool:
        return not self.lines

    # --- Internal helpers -----------------------------------------------------

    def _replace(self, line: CartLine) -> None:
        self.lines = [line if l.id == line.id else l for l in self.lines]

    def _next_line_id(self) -> int:
        return max((l.id for l in self.lines), default=0) + 1
