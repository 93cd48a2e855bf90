"""Unit tests for the StockLedger domain service."""

import threading

import pytest

from storefront.domain.exceptions import InsufficientStockError, ProductUnavailableError
from storefront.domain.model.catalog import CatalogItem
from storefront.domain.model.value_objects import Money
from storefront.domain.service.keyed_lock import KeyedLock
from storefront.domain.service.stock_ledger import StockLedger
from tests.fakes import FakeCatalogRepository


def _ledger(*stock: tuple[str, int]) -> tuple[StockLedger, FakeCatalogRepository]:
    repo = FakeCatalogRepository(
        items=[
            CatalogItem(id=pid, name=f"Item {pid}", base_price=Money.of("2.00"), stock_quantity=qty)
            for pid, qty in stock
        ]
    )
    return StockLedger(repo, KeyedLock()), repo


class TestReserve:

    def test_reserve_decrements(self):
        ledger, repo = _ledger(("1", 10))
        ledger.reserve("1", 4)
        assert repo.get_item("1").stock_quantity == 6

    def test_reserve_exact_stock(self):
        ledger, _ = _ledger(("1", 3))
        ledger.reserve("1", 3)
        assert ledger.available("1") == 0

    def test_insufficient_stock_leaves_stock_unchanged(self):
        ledger, repo = _ledger(("1", 2))
        with pytest.raises(InsufficientStockError, match="Available: 2, Requested: 5") as info:
            ledger.reserve("1", 5)
        assert info.value.available == 2
        assert info.value.requested == 5
        assert repo.get_item("1").stock_quantity == 2

    def test_unknown_item(self):
        ledger, _ = _ledger()
        with pytest.raises(ProductUnavailableError):
            ledger.reserve("404", 1)

    def test_release_restores(self):
        ledger, _ = _ledger(("1", 10))
        ledger.reserve("1", 4)
        ledger.release("1", 4)
        assert ledger.available("1") == 10


class TestCheckAvailable:

    def test_advisory_check(self):
        ledger, _ = _ledger(("1", 3))
        assert ledger.check_available("1", 3)
        assert not ledger.check_available("1", 4)
        assert not ledger.check_available("missing", 1)

    def test_check_has_no_side_effect(self):
        ledger, _ = _ledger(("1", 3))
        ledger.check_available("1", 3)
        assert ledger.available("1") == 3


class TestSetLevel:

    def test_overwrites(self):
        ledger, _ = _ledger(("1", 3))
        item = ledger.set_level("1", 50)
        assert item.stock_quantity == 50


class TestConcurrentReservations:

    def test_never_oversells(self):
        ledger, repo = _ledger(("1", 25))
        outcomes: list[bool] = []
        outcomes_lock = threading.Lock()
        start = threading.Barrier(40)

        def worker() -> None:
            start.wait()
            try:
                ledger.reserve("1", 1)
                ok = True
            except InsufficientStockError:
                ok = False
            with outcomes_lock:
                outcomes.append(ok)

        threads = [threading.Thread(target=worker) for _ in range(40)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count(True) == 25
        assert outcomes.count(False) == 15
        assert repo.get_item("1").stock_quantity == 0
