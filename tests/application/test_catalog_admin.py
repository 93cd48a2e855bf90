"""Tests for catalog administration: products, variants, stock, listing."""

from __future__ import annotations

import threading
from decimal import Decimal

import pytest

from storefront.application.add_product import AddProductHandler
from storefront.application.add_variant import AddVariantHandler
from storefront.application.set_stock import SetStockHandler
from storefront.application.show_catalog import ShowCatalogHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import (
    EntityNotFoundError,
    ProductUnavailableError,
    ValidationError,
)
from storefront.domain.model.catalog import CatalogItem
from storefront.domain.model.value_objects import Money
from storefront.domain.service.keyed_lock import KeyedLock
from storefront.domain.service.stock_ledger import StockLedger
from storefront.infrastructure.persistence.json_catalog_repository import JsonCatalogRepository
from tests.fakes import FakeCatalogRepository


def _repo() -> FakeCatalogRepository:
    return FakeCatalogRepository(
        items=[CatalogItem("1", "Latte", Money.of("4.00"), stock_quantity=5)]
    )


class _PausingCatalog(JsonCatalogRepository):
    """Holds one chosen thread right after it has read an item."""

    def __init__(self, *args) -> None:
        super().__init__(*args)
        self.paused_thread: threading.Thread | None = None
        self.fetched = threading.Event()
        self.resume = threading.Event()

    def get_item(self, product_id: str) -> CatalogItem | None:
        item = super().get_item(product_id)
        if threading.current_thread() is self.paused_thread:
            self.fetched.set()
            self.resume.wait(timeout=5)
        return item


class TestAddProduct:

    def test_assigns_next_numeric_id(self):
        repo = _repo()
        item = AddProductHandler(repo).handle("Mocha", "4.75", stock=3)
        assert item.id == "2"
        assert repo.get_item("2").stock_quantity == 3

    def test_first_product_gets_id_1(self):
        item = AddProductHandler(FakeCatalogRepository()).handle("Mocha", "4.75")
        assert item.id == "1"

    def test_duplicate_name_rejected(self):
        with pytest.raises(ValidationError, match="already exists"):
            AddProductHandler(_repo()).handle("latte", "4.00")

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            AddProductHandler(_repo()).handle("Water", "0")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            AddProductHandler(_repo()).handle("  ", "1.00")


class TestUpdateProduct:

    def test_change_price_and_deactivate(self):
        repo = _repo()
        item = UpdateProductHandler(repo, KeyedLock()).handle("1", new_price="4.50", active=False)
        assert item.base_price == Money.of("4.50")
        assert not repo.get_item("1").is_active

    def test_missing_product(self):
        with pytest.raises(EntityNotFoundError):
            UpdateProductHandler(_repo(), KeyedLock()).handle("9", new_price="1.00")

    def test_price_change_does_not_undo_a_concurrent_reservation(self, tmp_path):
        repo = _PausingCatalog(tmp_path / "products.json", tmp_path / "variants.json")
        repo.save_item(CatalogItem("1", "Latte", Money.of("4.00"), stock_quantity=5))
        locks = KeyedLock()
        ledger = StockLedger(repo, locks)

        admin = threading.Thread(
            target=UpdateProductHandler(repo, locks).handle,
            args=("1",),
            kwargs={"new_price": "4.50"},
        )
        repo.paused_thread = admin
        admin.start()
        assert repo.fetched.wait(timeout=5)

        buyer = threading.Thread(target=ledger.reserve, args=("1", 3))
        buyer.start()
        buyer.join(timeout=0.2)
        repo.resume.set()
        admin.join(timeout=5)
        buyer.join(timeout=5)

        item = repo.get_item("1")
        assert item.stock_quantity == 2
        assert item.base_price == Money.of("4.50")


class TestAddVariant:

    def test_adds_negative_modifier(self):
        repo = _repo()
        variant = AddVariantHandler(repo).handle("1", "skim", "Skim", "milk", "-0.25")
        assert variant.price_modifier == Decimal("-0.25")
        assert repo.list_variants("1") == [variant]

    def test_duplicate_id_rejected(self):
        repo = _repo()
        AddVariantHandler(repo).handle("1", "large", "Large", "size", "0.50")
        with pytest.raises(ValidationError, match="already exists"):
            AddVariantHandler(repo).handle("1", "large", "Large", "size", "0.50")

    def test_bad_modifier_rejected(self):
        with pytest.raises(ValidationError, match="Invalid price modifier"):
            AddVariantHandler(_repo()).handle("1", "x", "X", "size", "lots")

    def test_missing_product(self):
        with pytest.raises(EntityNotFoundError):
            AddVariantHandler(_repo()).handle("9", "x", "X", "size")


class TestSetStock:

    def test_sets_level(self):
        repo = _repo()
        SetStockHandler(StockLedger(repo, KeyedLock())).handle("1", 40)
        assert repo.get_item("1").stock_quantity == 40

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            SetStockHandler(StockLedger(_repo(), KeyedLock())).handle("1", -1)

    def test_missing_product(self):
        with pytest.raises(ProductUnavailableError):
            SetStockHandler(StockLedger(_repo(), KeyedLock())).handle("9", 1)


class TestShowCatalog:

    def test_hides_inactive_by_default(self):
        repo = _repo()
        AddProductHandler(repo).handle("Mocha", "4.75")
        UpdateProductHandler(repo, KeyedLock()).handle("2", active=False)

        assert [i.name for i in ShowCatalogHandler(repo).handle()] == ["Latte"]
        assert len(ShowCatalogHandler(repo).handle(include_inactive=True)) == 2

    def test_lists_variants(self):
        repo = _repo()
        AddVariantHandler(repo).handle("1", "large", "Large", "size", "0.5")
        dto = ShowCatalogHandler(repo).handle()[0]
        assert dto.base_price == "4.00"
        assert dto.variants[0].price_modifier == "0.50"
