"""Integration tests for the PlaceOrder use case.

Uses in-memory fake repositories — no file I/O.
"""

from __future__ import annotations

import threading
from decimal import Decimal

import pytest

from storefront.application.place_order import PlaceOrderHandler
from storefront.domain.exceptions import (
    CartChangedError,
    EmptyCartError,
    InsufficientStockError,
    InternalFailureError,
    PaymentDeclinedError,
    ProductUnavailableError,
    UnknownVariantError,
    ValidationError,
)
from storefront.domain.model.cart import CartLine
from storefront.domain.model.catalog import CatalogItem, Variant
from storefront.domain.model.order import OrderStatus, PaymentStatus
from storefront.domain.model.value_objects import Customization, Money, Quantity
from storefront.domain.service.keyed_lock import KeyedLock
from storefront.domain.service.stock_ledger import StockLedger
from tests.fakes import (
    FakeCartRepository,
    FakeCatalogRepository,
    FakeOrderRepository,
    FakePaymentAuthorizer,
)


def _line(line_id: int, product_id: str, qty: int, variants: list[str] | None = None) -> CartLine:
    return CartLine(line_id, product_id, Quantity(qty), Customization.of(variants))


class _Env:
    """Handler plus every collaborator, for assertions on side effects."""

    def __init__(
        self,
        carts: dict[str, list[CartLine]] | None = None,
        stock: dict[str, int] | None = None,
        payment: PaymentStatus = PaymentStatus.COMPLETED,
        order_repo: FakeOrderRepository | None = None,
    ) -> None:
        stock = stock or {}
        self.catalog = FakeCatalogRepository(
            items=[
                CatalogItem("1", "Latte", Money.of("4.00"), stock.get("1", 10)),
                CatalogItem("2", "Croissant", Money.of("3.45"), stock.get("2", 10)),
            ],
            variants=[
                Variant("large", "1", "Large", "size", Decimal("0.50")),
                Variant("oat", "1", "Oat milk", "milk", Decimal("0.75")),
            ],
        )
        self.carts = FakeCartRepository(carts)
        self.orders = order_repo or FakeOrderRepository()
        self.ledger = StockLedger(self.catalog, KeyedLock())
        self.payments = FakePaymentAuthorizer(payment)
        self.handler = PlaceOrderHandler(
            cart_repo=self.carts,
            catalog_repo=self.catalog,
            order_repo=self.orders,
            stock_ledger=self.ledger,
            payment_authorizer=self.payments,
            cart_locks=KeyedLock(),
        )

    def stock(self, product_id: str) -> int:
        return self.catalog.get_item(product_id).stock_quantity

    def assert_untouched(self, user_id: str, cart_size: int, stock: dict[str, int]) -> None:
        assert len(self.carts.get(user_id).lines) == cart_size
        assert self.orders.list_for_user(user_id, limit=10, offset=0) == []
        for product_id, qty in stock.items():
            assert self.stock(product_id) == qty


def _happy_env(**kwargs) -> _Env:
    return _Env(
        carts={"u1": [_line(1, "1", 2, ["large", "oat"]), _line(2, "2", 1)]},
        **kwargs,
    )


class TestPlaceOrderHappyPath:

    def test_returns_totals_and_payment_status(self):
        env = _happy_env()
        placed = env.handler.handle("u1", "card")
        # 2 x 5.25 + 3.45 = 13.95; tax 1.116
        assert placed.order_id == 1
        assert placed.total_amount == "15.07"
        assert placed.payment_status == "completed"

    def test_order_persisted_with_frozen_lines(self):
        env = _happy_env()
        placed = env.handler.handle("u1", "card", notes="no sugar")
        order = env.orders.get_by_id(placed.order_id)

        assert order.status == OrderStatus.PROCESSING
        assert order.subtotal == Money.of("13.95")
        assert order.tax_amount == Money.of("1.12")
        assert order.notes == "no sugar"
        assert [(l.product_id, l.quantity.value, l.unit_price) for l in order.lines] == [
            ("1", 2, Money.of("5.25")),
            ("2", 1, Money.of("3.45")),
        ]
        assert order.lines[0].customization == Customization.of(["oat", "large"])

    def test_stock_decremented_and_cart_cleared(self):
        env = _happy_env()
        env.handler.handle("u1", "cash")
        assert env.stock("1") == 8
        assert env.stock("2") == 9
        assert env.carts.get("u1").is_empty

    def test_authorizer_sees_total(self):
        env = _happy_env()
        env.handler.handle("u1", "card", payment_details={"card_number": "4242"})
        method, details, amount = env.payments.calls[0]
        assert method.value == "card"
        assert details == {"card_number": "4242"}
        assert amount == Money.of("15.07")

    def test_pending_payment_leaves_order_pending(self):
        env = _happy_env(payment=PaymentStatus.PENDING)
        placed = env.handler.handle("u1", "cash")
        assert placed.payment_status == "pending"
        assert env.orders.get_by_id(placed.order_id).status == OrderStatus.PENDING

    def test_prices_locked_at_placement(self):
        env = _happy_env()
        placed = env.handler.handle("u1", "card")

        env.catalog.get_item("1").update_price(Money.of("9.99"))

        order = env.orders.get_by_id(placed.order_id)
        assert order.lines[0].unit_price == Money.of("5.25")
        assert order.total_amount == Money.of("15.07")

    def test_exact_remaining_stock_succeeds(self):
        env = _Env(carts={"u1": [_line(1, "1", 3)]}, stock={"1": 3})
        env.handler.handle("u1", "card")
        assert env.stock("1") == 0


class TestPlaceOrderRejections:

    def test_empty_cart(self):
        env = _Env()
        with pytest.raises(EmptyCartError, match="Cart is empty"):
            env.handler.handle("u1", "card")
        assert env.payments.calls == []

    def test_invalid_payment_method(self):
        env = _happy_env()
        with pytest.raises(ValidationError, match="Valid payment method required"):
            env.handler.handle("u1", "bitcoin")
        env.assert_untouched("u1", 2, {"1": 10, "2": 10})

    def test_inactive_product(self):
        env = _happy_env()
        env.catalog.get_item("2").deactivate()
        with pytest.raises(ProductUnavailableError, match="Croissant"):
            env.handler.handle("u1", "card")
        env.assert_untouched("u1", 2, {"1": 10, "2": 10})
        assert env.payments.calls == []

    def test_deleted_product(self):
        env = _Env(carts={"u1": [_line(1, "404", 1)]})
        with pytest.raises(ProductUnavailableError):
            env.handler.handle("u1", "card")

    def test_insufficient_stock_has_no_side_effects(self):
        env = _happy_env(stock={"1": 1})
        with pytest.raises(InsufficientStockError, match="Available: 1, Requested: 2"):
            env.handler.handle("u1", "card")
        env.assert_untouched("u1", 2, {"1": 1, "2": 10})
        assert env.payments.calls == []

    def test_withdrawn_variant(self):
        env = _happy_env()
        env.catalog.get_variant("oat").is_active = False
        with pytest.raises(UnknownVariantError, match="'oat'"):
            env.handler.handle("u1", "card")
        env.assert_untouched("u1", 2, {"1": 10, "2": 10})

    def test_declined_payment_has_no_side_effects(self):
        env = _happy_env(payment=PaymentStatus.FAILED)
        with pytest.raises(PaymentDeclinedError, match="Payment failed"):
            env.handler.handle("u1", "card")
        env.assert_untouched("u1", 2, {"1": 10, "2": 10})


class _ExplodingOrderRepository(FakeOrderRepository):
    """Fails while storing lines, after the header and stock are written."""

    def append_lines(self, order_id, lines):
        raise OSError("disk full")


class _FailingSecondReserve(StockLedger):

    def __init__(self, inner: StockLedger) -> None:
        self.__dict__.update(inner.__dict__)
        self.reserved = 0

    def reserve(self, product_id, quantity):
        if self.reserved == 1:
            raise InsufficientStockError(product_id, 0, quantity)
        super().reserve(product_id, quantity)
        self.reserved += 1


class TestPlaceOrderRollback:

    def test_storage_failure_rolls_everything_back(self):
        env = _happy_env(order_repo=_ExplodingOrderRepository())
        with pytest.raises(InternalFailureError) as info:
            env.handler.handle("u1", "card")

        assert isinstance(info.value.__cause__, OSError)
        assert str(info.value) == "Internal server error"
        env.assert_untouched("u1", 2, {"1": 10, "2": 10})
        assert env.orders.list_all(None, limit=10, offset=0) == []

    def test_stock_lost_to_a_concurrent_order_rolls_back(self):
        env = _happy_env()
        handler = PlaceOrderHandler(
            cart_repo=env.carts,
            catalog_repo=env.catalog,
            order_repo=env.orders,
            stock_ledger=_FailingSecondReserve(env.ledger),
            payment_authorizer=env.payments,
            cart_locks=KeyedLock(),
        )

        with pytest.raises(InsufficientStockError):
            handler.handle("u1", "card")

        # The first line's reservation was released again.
        env.assert_untouched("u1", 2, {"1": 10, "2": 10})

    def test_cart_edited_after_snapshot(self):
        env = _happy_env()
        original_authorize = env.payments.authorize

        def authorize_then_edit_cart(method, details, amount):
            cart = env.carts.get("u1")
            cart.update_quantity(2, Quantity(5))
            env.carts.save(cart)
            return original_authorize(method, details, amount)

        env.payments.authorize = authorize_then_edit_cart

        with pytest.raises(CartChangedError):
            env.handler.handle("u1", "card")
        assert env.stock("1") == 10
        assert env.carts.get("u1").get_line(2).quantity == Quantity(5)
        assert env.orders.list_all(None, limit=10, offset=0) == []


class TestPlaceOrderConcurrency:

    def test_two_users_race_for_last_units(self):
        env = _Env(
            carts={"alice": [_line(1, "1", 2)], "bob": [_line(1, "1", 2)]},
            stock={"1": 3},
        )
        start = threading.Barrier(2)
        results: dict[str, str] = {}

        def place(user_id: str) -> None:
            start.wait()
            try:
                env.handler.handle(user_id, "card")
                results[user_id] = "ok"
            except InsufficientStockError:
                results[user_id] = "out of stock"

        threads = [threading.Thread(target=place, args=(u,)) for u in ("alice", "bob")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(results.values()) == ["ok", "out of stock"]
        assert env.stock("1") == 1
        assert len(env.orders.list_all(None, limit=10, offset=0)) == 1

    def test_same_user_double_submit_places_one_order(self):
        env = _Env(carts={"u1": [_line(1, "1", 1)]})
        start = threading.Barrier(2)
        errors: list[Exception] = []

        def place() -> None:
            start.wait()
            try:
                env.handler.handle("u1", "card")
            except (EmptyCartError, CartChangedError) as exc:
                errors.append(exc)

        threads = [threading.Thread(target=place) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        orders = env.orders.list_for_user("u1", limit=10, offset=0)
        assert len(orders) + len(errors) == 2
        assert len(orders) == 1
        assert env.stock("1") == 9
