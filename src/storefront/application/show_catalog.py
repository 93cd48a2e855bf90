"""Application service: Show Catalog use case (query)."""

from __future__ import annotations

from storefront.application.dto import CatalogItemDTO, VariantDTO, format_amount
from storefront.domain.repository.catalog_repository import CatalogRepository


class ShowCatalogHandler:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def handle(self, include_inactive: bool = False) -> list[CatalogItemDTO]:
        items = self._catalog_repo.list_items()
        return [
            CatalogItemDTO(
                id=item.id,
                name=item.name,
                base_price=format_amount(item.base_price),
                stock_quantity=item.stock_quantity,
                is_active=item.is_active,
                variants=[
                    VariantDTO(
                        id=v.id,
                        name=v.name,
                        category=v.category,
                        price_modifier=f"{v.price_modifier:.2f}",
                        is_active=v.is_active,
                    )
                    for v in self._catalog_repo.list_variants(item.id)
                ],
            )
            for item in items
            if include_inactive or item.is_active
        ]
