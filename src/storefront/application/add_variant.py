"""Application service: Add Variant use case."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.catalog import Variant
from storefront.domain.repository.catalog_repository import CatalogRepository


class AddVariantHandler:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def handle(
        self,
        product_id: str,
        variant_id: str,
        name: str,
        category: str,
        price_modifier: str = "0.00",
    ) -> Variant:
        """Attach a selectable variant to a catalog item.

        ``price_modifier`` may be negative (a discount option).
        """
        item = self._catalog_repo.get_item(product_id)
        if item is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        if self._catalog_repo.get_variant(variant_id) is not None:
            raise ValidationError(f"Variant '{variant_id}' already exists")

        try:
            modifier = Decimal(str(price_modifier))
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid price modifier: {price_modifier!r}") from exc

        variant = Variant(
            id=variant_id,
            product_id=item.id,
            name=name,
            category=category,
            price_modifier=modifier,
        )
        self._catalog_repo.save_variant(variant)
        return variant
