"""Application service: Add To Cart use case."""

from __future__ import annotations

from typing import Iterable

import structlog

from storefront.domain.exceptions import EntityNotFoundError, InsufficientStockError
from storefront.domain.model.cart import CartLine
from storefront.domain.model.value_objects import Customization, Quantity
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.keyed_lock import KeyedLock
from storefront.domain.service.pricing import PriceCalculator

logger = structlog.get_logger(__name__)


class AddToCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog_repo: CatalogRepository,
        cart_locks: KeyedLock,
    ) -> None:
        self._cart_repo = cart_repo
        self._catalog_repo = catalog_repo
        self._cart_locks = cart_locks
        self._pricing = PriceCalculator(catalog_repo)

    def handle(
        self,
        user_id: str,
        product_id: str,
        quantity: int,
        variant_ids: Iterable[str] | None = None,
    ) -> CartLine:
        """Add a product to the user's cart.

        A line with the same product and the same set of variants is
        merged into (quantities summed), never duplicated.
        """
        qty = Quantity(quantity)
        customization = Customization.of(variant_ids)

        item = self._catalog_repo.get_item(product_id)
        if item is None or not item.is_active:
            raise EntityNotFoundError(f"Product not found: '{product_id}'")
        if not item.has_stock(qty.value):
            raise InsufficientStockError(
                item.id, item.stock_quantity, qty.value, product_name=item.name
            )

        # Rejects unknown or inactive variants before anything is stored.
        self._pricing.resolve_unit_price(item, customization)

        with self._cart_locks.hold(user_id):
            cart = self._cart_repo.get(user_id)
            existing = cart.find(item.id, customization)
            if existing is not None and not item.has_stock(existing.quantity.value + qty.value):
                raise InsufficientStockError(
                    item.id,
                    item.stock_quantity,
                    existing.quantity.value + qty.value,
                    product_name=item.name,
                )
            line = cart.add(item.id, qty, customization)
            self._cart_repo.save(cart)

        logger.info(
            "Cart line added",
            user_id=user_id,
            product_id=item.id,
            line_id=line.id,
            quantity=line.quantity.value,
        )
        return line
