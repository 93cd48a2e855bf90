"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import (
    Order,
    OrderLine,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from storefront.domain.model.value_objects import Customization, Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)
        # Last issued id, kept apart from the orders so discarded ids stay used.
        self._sequence = JsonFile(
            file_path.with_name(file_path.stem + ".seq.json"),
            empty=lambda: {"last_id": 0},
        )

    # --- OrderRepository interface --------------------------------------------

    def create(self, order: Order) -> int:
        with self._sequence.update() as sequence, self._file.update() as orders:
            order.id = self._next_id(sequence, orders)
            orders.append(self._header_to_raw(order))
        return order.id

    def append_lines(self, order_id: int, lines: list[OrderLine]) -> None:
        with self._file.update() as orders:
            raw = self._find(orders, order_id)
            raw["lines"].extend(self._line_to_raw(line) for line in lines)

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._file.read():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_for_user(self, user_id: str, limit: int, offset: int) -> list[Order]:
        mine = [raw for raw in self._file.read() if raw["user_id"] == user_id]
        return self._page(mine, limit, offset)

    def list_all(
        self, status: OrderStatus | None, limit: int, offset: int
    ) -> list[Order]:
        records = self._file.read()
        if status is not None:
            records = [raw for raw in records if raw["status"] == status.value]
        return self._page(records, limit, offset)

    def save(self, order: Order) -> None:
        with self._file.update() as orders:
            raw = self._find(orders, order.id)  # type: ignore[arg-type]
            raw["status"] = order.status.value
            raw["payment_status"] = order.payment_status.value

    def discard(self, order_id: int) -> None:
        with self._file.update() as orders:
            orders[:] = [raw for raw in orders if raw["id"] != order_id]

    # --- Helpers --------------------------------------------------------------

    @staticmethod
    def _next_id(sequence: dict, orders: list[dict]) -> int:
        last = max([sequence["last_id"], *(o["id"] for o in orders)])
        sequence["last_id"] = last + 1
        return last + 1

    @staticmethod
    def _find(orders: list[dict], order_id: int) -> dict:
        for raw in orders:
            if raw["id"] == order_id:
                return raw
        raise EntityNotFoundError(f"Order #{order_id} not found")

    def _page(self, records: list[dict], limit: int, offset: int) -> list[Order]:
        newest_first = sorted(
            records, key=lambda r: (r["created_at"], r["id"]), reverse=True
        )
        return [self._to_domain(raw) for raw in newest_first[offset:offset + limit]]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _line_to_raw(line: OrderLine) -> dict:
        return {
            "product_id": line.product_id,
            "product_name": line.product_name,
            "quantity": line.quantity.value,
            "unit_price": str(line.unit_price.amount),
            "currency": line.unit_price.currency,
            "variant_ids": line.customization.to_list(),
        }

    @staticmethod
    def _header_to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status.value,
            "payment_method": order.payment_method.value,
            "payment_status": order.payment_status.value,
            "subtotal": str(order.subtotal.amount),
            "tax_amount": str(order.tax_amount.amount),
            "total_amount": str(order.total_amount.amount),
            "notes": order.notes,
            "created_at": order.created_at.isoformat(),
            "lines": [],  # filled by append_lines
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        lines = [
            OrderLine(
                product_id=l["product_id"],
                product_name=l["product_name"],
                quantity=Quantity(l["quantity"]),
                unit_price=Money(Decimal(l["unit_price"]), l.get("currency", "USD")),
                customization=Customization.of(l.get("variant_ids")),
            )
            for l in raw["lines"]
        ]
        return Order(
            id=raw["id"],
            user_id=raw["user_id"],
            lines=lines,
            subtotal=Money(Decimal(raw["subtotal"])),
            tax_amount=Money(Decimal(raw["tax_amount"])),
            total_amount=Money(Decimal(raw["total_amount"])),
            payment_method=PaymentMethod(raw["payment_method"]),
            payment_status=PaymentStatus(raw["payment_status"]),
            status=OrderStatus(raw["status"]),
            notes=raw.get("notes"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
