"""Application service: Update Cart Item use case."""

from __future__ import annotations

from storefront.domain.exceptions import InsufficientStockError, ProductUnavailableError
from storefront.domain.model.cart import CartLine
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.keyed_lock import KeyedLock


class UpdateCartItemHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog_repo: CatalogRepository,
        cart_locks: KeyedLock,
    ) -> None:
        self._cart_repo = cart_repo
        self._catalog_repo = catalog_repo
        self._cart_locks = cart_locks

    def handle(self, user_id: str, line_id: int, quantity: int) -> CartLine:
        """Set the quantity of one cart line (replaces, does not add)."""
        qty = Quantity(quantity)

        with self._cart_locks.hold(user_id):
            cart = self._cart_repo.get(user_id)
            line = cart.get_line(line_id)

            item = self._catalog_repo.get_item(line.product_id)
            if item is None or not item.is_active:
                raise ProductUnavailableError(line.product_id, item.name if item else None)
            if not item.has_stock(qty.value):
                raise InsufficientStockError(
                    item.id, item.stock_quantity, qty.value, product_name=item.name
                )

            updated = cart.update_quantity(line_id, qty)
            self._cart_repo.save(cart)
        return updated
