"""Mock payment authorizer.

Approves everything except the well-known test card below, which is
always declined so the failure path can be exercised end to end.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from storefront.domain.model.order import PaymentMethod, PaymentStatus
from storefront.domain.model.value_objects import Money
from storefront.domain.service.payment_authorizer import PaymentAuthorizer

logger = structlog.get_logger(__name__)

DECLINED_CARD_NUMBER = "4000000000000002"


class MockPaymentAuthorizer(PaymentAuthorizer):

    def __init__(self, declined_cards: set[str] | None = None) -> None:
        self._declined_cards = declined_cards or {DECLINED_CARD_NUMBER}

    def authorize(
        self,
        method: PaymentMethod,
        details: Mapping[str, Any] | None,
        amount: Money,
    ) -> PaymentStatus:
        status = PaymentStatus.COMPLETED
        if method == PaymentMethod.CARD:
            card_number = str((details or {}).get("card_number", ""))
            if card_number in self._declined_cards:
                status = PaymentStatus.FAILED

        logger.info(
            "Payment authorized" if status == PaymentStatus.COMPLETED else "Payment declined",
            method=method.value,
            amount=str(amount.amount),
            status=status.value,
        )
        return status
