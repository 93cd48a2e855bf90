"""Domain service: Stock Ledger.

The authoritative record of how many units of each catalog item can
still be sold.  ``check_available`` is advisory (a read without a lock);
``reserve`` is authoritative: it checks and decrements while holding the
item's lock, so concurrent reservations can never overdraw an item.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import InsufficientStockError, ProductUnavailableError
from storefront.domain.model.catalog import CatalogItem
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.keyed_lock import KeyedLock

logger = structlog.get_logger(__name__)


class StockLedger:

    def __init__(self, catalog_repo: CatalogRepository, locks: KeyedLock) -> None:
        self._catalog_repo = catalog_repo
        self._locks = locks

    def available(self, product_id: str) -> int:
        return self._load(product_id).stock_quantity

    def check_available(self, product_id: str, quantity: int) -> bool:
        """True iff current stock covers ``quantity``.  No side effect."""
        item = self._catalog_repo.get_item(product_id)
        return item is not None and item.has_stock(quantity)

    def reserve(self, product_id: str, quantity: int) -> None:
        """Atomically take ``quantity`` units of an item.

        Raises InsufficientStockError and leaves stock unchanged when
        fewer units remain.
        """
        with self._locks.hold(product_id):
            item = self._load(product_id)
            if not item.has_stock(quantity):
                raise InsufficientStockError(
                    product_id,
                    available=item.stock_quantity,
                    requested=quantity,
                    product_name=item.name,
                )
            item.take_stock(quantity)
            self._catalog_repo.save_item(item)

        logger.debug(
            "Stock reserved",
            product_id=product_id,
            quantity=quantity,
            remaining=item.stock_quantity,
        )

    def release(self, product_id: str, quantity: int) -> None:
        """Give back units taken by ``reserve`` (compensation on rollback)."""
        with self._locks.hold(product_id):
            item = self._load(product_id)
            item.return_stock(quantity)
            self._catalog_repo.save_item(item)

        logger.info(
            "Stock released",
            product_id=product_id,
            quantity=quantity,
            remaining=item.stock_quantity,
        )

    def set_level(self, product_id: str, quantity: int) -> CatalogItem:
        """Overwrite the stock level (catalog administration)."""
        with self._locks.hold(product_id):
            item = self._load(product_id)
            item.set_stock(quantity)
            self._catalog_repo.save_item(item)
        return item

    def _load(self, product_id: str) -> CatalogItem:
        item = self._catalog_repo.get_item(product_id)
        if item is None:
            raise ProductUnavailableError(product_id)
        return item
