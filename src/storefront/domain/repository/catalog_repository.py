"""Abstract repository for the catalog (items and their variants).

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory) live in the
infrastructure layer and the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.catalog import CatalogItem, Variant


class CatalogRepository(ABC):

    @abstractmethod
    def get_item(self, product_id: str) -> CatalogItem | None:
        """Return a catalog item by its ID, or None if not found."""

    @abstractmethod
    def get_variant(self, variant_id: str) -> Variant | None:
        """Return a variant by its ID, or None if not found."""

    @abstractmethod
    def list_items(self) -> list[CatalogItem]:
        """Return every item in the catalog."""

    @abstractmethod
    def list_variants(self, product_id: str) -> list[Variant]:
        """Return the variants defined for an item."""

    @abstractmethod
    def save_item(self, item: CatalogItem) -> None:
        """Persist a new or updated catalog item."""

    @abstractmethod
    def save_variant(self, variant: Variant) -> None:
        """Persist a new or updated variant."""
