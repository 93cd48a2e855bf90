"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order, OrderLine, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def create(self, order: Order) -> int:
        """Insert the order header, assign ``order.id`` and return it.

        Lines are stored separately via ``append_lines``.
        """

    @abstractmethod
    def append_lines(self, order_id: int, lines: list[OrderLine]) -> None:
        """Store the frozen line copies of a created order."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order with its lines, or None if not found."""

    @abstractmethod
    def list_for_user(self, user_id: str, limit: int, offset: int) -> list[Order]:
        """Return a user's orders, newest first."""

    @abstractmethod
    def list_all(
        self, status: OrderStatus | None, limit: int, offset: int
    ) -> list[Order]:
        """Return every order, optionally filtered by status, newest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist the status of an existing order."""

    @abstractmethod
    def discard(self, order_id: int) -> None:
        """Delete an order and its lines (transaction rollback only)."""
