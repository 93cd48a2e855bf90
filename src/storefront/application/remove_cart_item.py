"""Application service: Remove Cart Item and Clear Cart use cases."""

from __future__ import annotations

from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.service.keyed_lock import KeyedLock


class RemoveCartItemHandler:

    def __init__(self, cart_repo: CartRepository, cart_locks: KeyedLock) -> None:
        self._cart_repo = cart_repo
        self._cart_locks = cart_locks

    def handle(self, user_id: str, line_id: int) -> None:
        with self._cart_locks.hold(user_id):
            cart = self._cart_repo.get(user_id)
            cart.remove(line_id)
            self._cart_repo.save(cart)


class ClearCartHandler:

    def __init__(self, cart_repo: CartRepository, cart_locks: KeyedLock) -> None:
        self._cart_repo = cart_repo
        self._cart_locks = cart_locks

    def handle(self, user_id: str) -> None:
        with self._cart_locks.hold(user_id):
            self._cart_repo.clear(user_id)
