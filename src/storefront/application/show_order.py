"""Application service: Show Order and List Orders use cases (queries)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, OrderSummaryDTO
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository

MAX_PAGE_SIZE = 100


def parse_order_status(raw: str | OrderStatus) -> OrderStatus:
    if isinstance(raw, OrderStatus):
        return raw
    try:
        return OrderStatus(raw)
    except ValueError:
        raise ValidationError("Valid status required") from None


def _check_page(limit: int, offset: int) -> None:
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
    if offset < 0:
        raise ValidationError("Offset cannot be negative")


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, user_id: str, order_id: int) -> OrderDTO:
        """Return one of the user's orders; other users' orders are 'not found'."""
        order = self._order_repo.get_by_id(order_id)
        if order is None or order.user_id != user_id:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return OrderDTO.from_order(order)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def for_user(self, user_id: str, limit: int = 10, offset: int = 0) -> list[OrderSummaryDTO]:
        _check_page(limit, offset)
        orders = self._order_repo.list_for_user(user_id, limit=limit, offset=offset)
        return [OrderSummaryDTO.from_order(o) for o in orders]

    def all(
        self,
        status: str | OrderStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[OrderSummaryDTO]:
        _check_page(limit, offset)
        wanted = parse_order_status(status) if status else None
        orders = self._order_repo.list_all(wanted, limit=limit, offset=offset)
        return [OrderSummaryDTO.from_order(o) for o in orders]
