"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly.  Subclasses of
ValidationError are the caller's to fix (adjust the cart, pick another
payment method) and carry no side effects; InternalFailureError means
"try again later".
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class EmptyCartError(ValidationError):
    def __init__(self, user_id: str) -> None:
        super().__init__("Cart is empty")
        self.user_id = user_id


class ProductUnavailableError(ValidationError):
    """The catalog item is inactive or no longer exists."""

    def __init__(self, product_id: str, product_name: str | None = None) -> None:
        label = product_name or product_id
        super().__init__(f"Product '{label}' is no longer available")
        self.product_id = product_id


class InsufficientStockError(ValidationError):
    def __init__(
        self,
        product_id: str,
        available: int,
        requested: int,
        product_name: str | None = None,
    ) -> None:
        label = product_name or product_id
        super().__init__(
            f"Insufficient stock for {label}. "
            f"Available: {available}, Requested: {requested}"
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class UnknownVariantError(ValidationError):
    """A customization references a variant that is missing, inactive
    or belongs to a different catalog item."""

    def __init__(self, variant_id: str, product_id: str) -> None:
        super().__init__(
            f"Variant '{variant_id}' is not available for product '{product_id}'"
        )
        self.variant_id = variant_id
        self.product_id = product_id


class PaymentDeclinedError(ValidationError):
    def __init__(self, message: str = "Payment failed. Please try again.") -> None:
        super().__init__(message)


class CartChangedError(ValidationError):
    """The cart was modified while an order was being placed from it."""

    def __init__(self, user_id: str) -> None:
        super().__init__("Cart changed during checkout. Please review and retry.")
        self.user_id = user_id


class NothingToReorderError(ValidationError):
    def __init__(self, order_id: int) -> None:
        super().__init__(f"No available items to reorder from order #{order_id}")
        self.order_id = order_id


class InternalFailureError(DomainException):
    """Something unexpected went wrong; details are logged, not exposed."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
