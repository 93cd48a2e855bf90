"""Application service: Reorder use case.

Copies the lines of a previous order back into the owner's cart:

- items no longer active (or whose variants were withdrawn) are skipped;
- lines with the same item and customization are merged;
- quantities are capped at the stock available right now, and items
  with no stock at all are skipped, without raising.

Only an order with no active item at all is an error.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import (
    EntityNotFoundError,
    NothingToReorderError,
    UnknownVariantError,
)
from storefront.domain.model.cart import CartLine
from storefront.domain.model.value_objects import Customization, Quantity
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.keyed_lock import KeyedLock
from storefront.domain.service.pricing import PriceCalculator

logger = structlog.get_logger(__name__)


class ReorderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        catalog_repo: CatalogRepository,
        cart_locks: KeyedLock,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._catalog_repo = catalog_repo
        self._cart_locks = cart_locks
        self._pricing = PriceCalculator(catalog_repo)

    def handle(self, user_id: str, order_id: int) -> list[CartLine]:
        order = self._order_repo.get_by_id(order_id)
        if order is None or order.user_id != user_id:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        wanted: dict[tuple[str, Customization], int] = {}
        for line in order.lines:
            key = (line.product_id, line.customization)
            wanted[key] = wanted.get(key, 0) + line.quantity.value

        touched: list[CartLine] = []
        any_active = False

        with self._cart_locks.hold(user_id):
            cart = self._cart_repo.get(user_id)
            for (product_id, customization), quantity in wanted.items():
                item = self._catalog_repo.get_item(product_id)
                if item is None or not item.is_active:
                    continue
                try:
                    self._pricing.resolve_unit_price(item, customization)
                except UnknownVariantError:
                    continue
                any_active = True

                existing = cart.find(product_id, customization)
                in_cart = existing.quantity.value if existing else 0
                to_add = min(in_cart + quantity, item.stock_quantity) - in_cart
                if to_add <= 0:
                    continue
                touched.append(cart.add(product_id, Quantity(to_add), customization))

            if not any_active:
                raise NothingToReorderError(order_id)
            self._cart_repo.save(cart)

        logger.info(
            "Order copied to cart",
            user_id=user_id,
            order_id=order_id,
            lines=len(touched),
        )
        return touched
