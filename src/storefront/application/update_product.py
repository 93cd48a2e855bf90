"""Application service: Update Product use case."""

from __future__ import annotations

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.catalog import CatalogItem
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.keyed_lock import KeyedLock


class UpdateProductHandler:

    def __init__(self, catalog_repo: CatalogRepository, item_locks: KeyedLock) -> None:
        self._catalog_repo = catalog_repo
        self._item_locks = item_locks

    def handle(
        self,
        product_id: str,
        new_price: str | None = None,
        active: bool | None = None,
    ) -> CatalogItem:
        """Update a product's price and/or active flag.

        This does NOT affect any existing orders; they captured
        resolved prices at placement time.  Carts pick up the new
        price the next time they are priced.

        Saving writes the whole item, stock level included, so the
        read-modify-write runs under the item lock ``StockLedger`` uses.
        """
        price = Money.of(new_price) if new_price is not None else None

        with self._item_locks.hold(product_id):
            item = self._catalog_repo.get_item(product_id)
            if item is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            if price is not None:
                item.update_price(price)
            if active is True:
                item.activate()
            elif active is False:
                item.deactivate()

            self._catalog_repo.save_item(item)
        return item
