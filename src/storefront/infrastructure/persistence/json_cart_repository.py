"""JSON-file-backed implementation of CartRepository.

The file maps user IDs to their list of cart lines.
"""

from __future__ import annotations

from pathlib import Path

from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.value_objects import Customization, Quantity
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=dict)

    # --- CartRepository interface ---------------------------------------------

    def get(self, user_id: str) -> Cart:
        raw_lines = self._file.read().get(user_id, [])
        return Cart(user_id=user_id, lines=[self._to_domain(r) for r in raw_lines])

    def save(self, cart: Cart) -> None:
        with self._file.update() as carts:
            if cart.lines:
                carts[cart.user_id] = [self._to_raw(line) for line in cart.lines]
            else:
                carts.pop(cart.user_id, None)

    def clear(self, user_id: str) -> None:
        with self._file.update() as carts:
            carts.pop(user_id, None)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(line: CartLine) -> dict:
        return {
            "id": line.id,
            "product_id": line.product_id,
            "quantity": line.quantity.value,
            "variant_ids": line.customization.to_list(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> CartLine:
        return CartLine(
            id=raw["id"],
            product_id=raw["product_id"],
            quantity=Quantity(raw["quantity"]),
            customization=Customization.of(raw.get("variant_ids")),
        )
