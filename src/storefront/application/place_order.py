"""Application service: Place Order use case.

Turns the user's cart into an order.  The placement walks a strictly
linear sequence of steps, each of which may abort:

1. Snapshot: read the cart; an empty cart aborts with EmptyCartError.
2. Validate: every item must be active and in stock; unit prices are
   resolved from the catalog as it is *now*.
3. Aggregate: subtotal, tax and total (``Order.create``).
4. Authorize: ask the PaymentAuthorizer; a decline aborts.
5. Commit: reserve stock, persist the order and its lines, clear the
   cart.  One ``Transaction``: any failure undoes all of it.
6. Success: return order id, total and payment status.

Steps 1-4 have no side effects, so aborting there needs no cleanup.  The
payment call completes before any lock is taken.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from storefront.application.dto import PlacedOrderDTO, format_amount
from storefront.application.transaction import Transaction
from storefront.domain.exceptions import (
    CartChangedError,
    DomainException,
    EmptyCartError,
    InsufficientStockError,
    InternalFailureError,
    PaymentDeclinedError,
    ProductUnavailableError,
    ValidationError,
)
from storefront.domain.model.cart import CartSnapshot
from storefront.domain.model.order import Order, OrderLine, PaymentMethod, PaymentStatus
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.keyed_lock import KeyedLock
from storefront.domain.service.payment_authorizer import PaymentAuthorizer
from storefront.domain.service.pricing import PriceCalculator
from storefront.domain.service.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


def parse_payment_method(raw: str | PaymentMethod) -> PaymentMethod:
    if isinstance(raw, PaymentMethod):
        return raw
    try:
        return PaymentMethod(raw)
    except ValueError:
        raise ValidationError("Valid payment method required") from None


class PlaceOrderHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        catalog_repo: CatalogRepository,
        order_repo: OrderRepository,
        stock_ledger: StockLedger,
        payment_authorizer: PaymentAuthorizer,
        cart_locks: KeyedLock,
    ) -> None:
        self._cart_repo = cart_repo
        self._catalog_repo = catalog_repo
        self._order_repo = order_repo
        self._stock = stock_ledger
        self._payments = payment_authorizer
        self._cart_locks = cart_locks
        self._pricing = PriceCalculator(catalog_repo)

    def handle(
        self,
        user_id: str,
        payment_method: str | PaymentMethod,
        payment_details: Mapping[str, Any] | None = None,
        notes: str | None = None,
    ) -> PlacedOrderDTO:
        method = parse_payment_method(payment_method)
        log = logger.bind(user_id=user_id, payment_method=method.value)

        try:
            order = self._place(user_id, method, payment_details, notes)
        except DomainException as exc:
            log.info("Order placement rejected", reason=type(exc).__name__, error=str(exc))
            raise
        except Exception as exc:
            log.exception("Order placement failed")
            raise InternalFailureError() from exc

        log.info(
            "Order placed",
            order_id=order.id,
            total_amount=format_amount(order.total_amount),
            status=order.status.value,
        )
        return PlacedOrderDTO(
            order_id=order.id,  # type: ignore[arg-type]
            total_amount=format_amount(order.total_amount),
            payment_status=order.payment_status.value,
        )

    # --- Steps ----------------------------------------------------------------

    def _place(
        self,
        user_id: str,
        method: PaymentMethod,
        payment_details: Mapping[str, Any] | None,
        notes: str | None,
    ) -> Order:
        snapshot = self._cart_repo.get(user_id).snapshot()
        if snapshot.is_empty:
            raise EmptyCartError(user_id)

        lines = self._price_lines(snapshot)
        order = Order.create(
            user_id=user_id,
            lines=lines,
            payment_method=method,
            notes=notes,
        )

        payment_status = self._payments.authorize(method, payment_details, order.total_amount)
        if payment_status == PaymentStatus.FAILED:
            raise PaymentDeclinedError()
        order.payment_status = payment_status

        self._commit(snapshot, order)
        return order

    def _price_lines(self, snapshot: CartSnapshot) -> list[OrderLine]:
        lines: list[OrderLine] = []
        for cart_line in snapshot.lines:
            item = self._catalog_repo.get_item(cart_line.product_id)
            if item is None or not item.is_active:
                raise ProductUnavailableError(
                    cart_line.product_id, item.name if item else None
                )

            quantity = cart_line.quantity.value
            if not self._stock.check_available(item.id, quantity):
                raise InsufficientStockError(
                    item.id,
                    available=item.stock_quantity,
                    requested=quantity,
                    product_name=item.name,
                )

            lines.append(
                OrderLine(
                    product_id=item.id,
                    product_name=item.name,
                    quantity=cart_line.quantity,
                    unit_price=self._pricing.resolve_unit_price(
                        item, cart_line.customization
                    ),
                    customization=cart_line.customization,
                )
            )
        return lines

    def _commit(self, snapshot: CartSnapshot, order: Order) -> None:
        user_id = snapshot.user_id

        # The cart lock is held until any rollback has finished.
        with self._cart_locks.hold(user_id), Transaction(f"place-order:{user_id}") as tx:
            current = self._cart_repo.get(user_id).snapshot()
            if current.is_empty:
                raise EmptyCartError(user_id)
            if current != snapshot:
                raise CartChangedError(user_id)

            for line in order.lines:
                self._stock.reserve(line.product_id, line.quantity.value)
                tx.on_rollback(
                    f"release {line.product_id}",
                    self._stock.release,
                    line.product_id,
                    line.quantity.value,
                )

            order_id = self._order_repo.create(order)
            tx.on_rollback(f"discard order #{order_id}", self._order_repo.discard, order_id)
            self._order_repo.append_lines(order_id, order.lines)

            order.record_payment()
            self._order_repo.save(order)

            # Final step; registers no compensation.
            self._cart_repo.clear(user_id)
