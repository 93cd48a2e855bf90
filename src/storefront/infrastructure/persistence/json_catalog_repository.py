"""JSON-file-backed implementation of CatalogRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from storefront.domain.model.catalog import CatalogItem, Variant
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, products_path: Path, variants_path: Path) -> None:
        self._products = JsonFile(products_path)
        self._variants = JsonFile(variants_path)

    # --- CatalogRepository interface ------------------------------------------

    def get_item(self, product_id: str) -> CatalogItem | None:
        for raw in self._products.read():
            if raw["id"] == product_id:
                return self._item_to_domain(raw)
        return None

    def get_variant(self, variant_id: str) -> Variant | None:
        for raw in self._variants.read():
            if raw["id"] == variant_id:
                return self._variant_to_domain(raw)
        return None

    def list_items(self) -> list[CatalogItem]:
        return [self._item_to_domain(raw) for raw in self._products.read()]

    def list_variants(self, product_id: str) -> list[Variant]:
        return [
            self._variant_to_domain(raw)
            for raw in self._variants.read()
            if raw["product_id"] == product_id
        ]

    def save_item(self, item: CatalogItem) -> None:
        with self._products.update() as records:
            self._upsert(records, self._item_to_raw(item))

    def save_variant(self, variant: Variant) -> None:
        with self._variants.update() as records:
            self._upsert(records, self._variant_to_raw(variant))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _upsert(records: list[dict], raw: dict) -> None:
        for i, existing in enumerate(records):
            if existing["id"] == raw["id"]:
                records[i] = raw
                return
        records.append(raw)

    @staticmethod
    def _item_to_raw(item: CatalogItem) -> dict:
        return {
            "id": item.id,
            "name": item.name,
            "price": str(item.base_price.amount),
            "currency": item.base_price.currency,
            "stock_quantity": item.stock_quantity,
            "is_active": item.is_active,
        }

    @staticmethod
    def _item_to_domain(raw: dict) -> CatalogItem:
        return CatalogItem(
            id=raw["id"],
            name=raw["name"],
            base_price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            stock_quantity=raw.get("stock_quantity", 0),
            is_active=raw.get("is_active", True),
        )

    @staticmethod
    def _variant_to_raw(variant: Variant) -> dict:
        return {
            "id": variant.id,
            "product_id": variant.product_id,
            "name": variant.name,
            "category": variant.category,
            "price_modifier": str(variant.price_modifier),
            "is_active": variant.is_active,
        }

    @staticmethod
    def _variant_to_domain(raw: dict) -> Variant:
        return Variant(
            id=raw["id"],
            product_id=raw["product_id"],
            name=raw["name"],
            category=raw["category"],
            price_modifier=Decimal(raw.get("price_modifier", "0")),
            is_active=raw.get("is_active", True),
        )
