"""Order aggregate.

An Order is created exactly once from a cart snapshot and never changes
in content afterwards; only its status moves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Customization, Money, Quantity
from storefront.domain.service.pricing import summarize


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentMethod(Enum):
    CARD = "card"
    CASH = "cash"


TERMINAL_STATUSES = (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


@dataclass(frozen=True)
class OrderLine:
    """Frozen copy of a cart line with the unit price resolved at order time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # base price + variant modifiers, locked at placement
    customization: Customization = Customization()

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use ``Order.create()`` for new orders; it computes the totals.  The
    ``__init__`` is intentionally simple so repositories can reconstitute
    persisted orders without recomputing anything.
    """

    id: int | None
    user_id: str
    lines: list[OrderLine]
    subtotal: Money
    tax_amount: Money
    total_amount: Money
    payment_method: PaymentMethod
    payment_status: PaymentStatus = PaymentStatus.PENDING
    status: OrderStatus = OrderStatus.PENDING
    notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        lines: list[OrderLine],
        payment_method: PaymentMethod,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        notes: str | None = None,
    ) -> Order:
        if not user_id:
            raise ValidationError("Order owner is required")
        if not lines:
            raise ValidationError("Order must contain at least one item")

        totals = summarize((line.unit_price, line.quantity.value) for line in lines)
        return Order(
            id=None,
            user_id=user_id,
            lines=list(lines),
            subtotal=totals.subtotal,
            tax_amount=totals.tax,
            total_amount=totals.total,
            payment_method=payment_method,
            payment_status=payment_status,
            notes=notes or None,
        )

    # --- State transitions ----------------------------------------------------

    def record_payment(self) -> None:
        """PENDING -> PROCESSING once payment has settled.

        An order whose payment is still pending stays PENDING.
        """
        if self.status != OrderStatus.PENDING:
            raise ValidationError(
                f"Cannot record payment: current status is {self.status.value}, "
                f"expected pending"
            )
        if self.payment_status == PaymentStatus.COMPLETED:
            self.status = OrderStatus.PROCESSING

    def update_status(self, new_status: OrderStatus) -> None:
        if self.status in TERMINAL_STATUSES:
            raise ValidationError(
                f"Cannot change status of a {self.status.value} order"
            )
        self.status = new_status

    # --- Computed properties --------------------------------------------------

    @property
    def item_count(self) -> int:
        return sum(line.quantity.value for line in self.lines)
