"""Abstract repository for the Cart aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def get(self, user_id: str) -> Cart:
        """Return the user's cart; an empty cart if they have none."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist the cart's current lines."""

    @abstractmethod
    def clear(self, user_id: str) -> None:
        """Remove every line from the user's cart."""
