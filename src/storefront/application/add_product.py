"""Application service: Add Product use case."""

from __future__ import annotations

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.catalog import CatalogItem
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.catalog_repository import CatalogRepository


class AddProductHandler:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def handle(self, name: str, price: str, stock: int = 0) -> CatalogItem:
        """Add a new item to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        all_items = self._catalog_repo.list_items()
        if any(i.name.lower() == name.strip().lower() for i in all_items):
            raise ValidationError(f"Product '{name}' already exists")

        base_price = Money.of(price)
        if base_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")

        # Auto-assign ID based on existing numeric IDs
        numeric_ids = [int(i.id) for i in all_items if i.id.isdigit()]
        next_id = str(max(numeric_ids, default=0) + 1)

        item = CatalogItem(
            id=next_id,
            name=name.strip(),
            base_price=base_price,
            stock_quantity=stock,
        )
        self._catalog_repo.save_item(item)
        return item
