"""Port: payment authorization.

Order placement only needs a yes/no answer for an amount.  A production
implementation wraps a real gateway client (with its own timeout, after
which it must answer FAILED); the shipped one is a mock.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from storefront.domain.model.order import PaymentMethod, PaymentStatus
from storefront.domain.model.value_objects import Money


class PaymentAuthorizer(ABC):

    @abstractmethod
    def authorize(
        self,
        method: PaymentMethod,
        details: Mapping[str, Any] | None,
        amount: Money,
    ) -> PaymentStatus:
        """Return COMPLETED or FAILED for a payment attempt."""
