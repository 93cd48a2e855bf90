"""Application service: Update Order Status use case (administration).

Status is the only part of an order that changes after placement.
"""

from __future__ import annotations

import structlog

from storefront.application.show_order import parse_order_status
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int, status: str | OrderStatus) -> None:
        new_status = parse_order_status(status)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        previous = order.status
        order.update_status(new_status)
        self._order_repo.save(order)

        logger.info(
            "Order status updated",
            order_id=order_id,
            previous=previous.value,
            status=new_status.value,
        )
