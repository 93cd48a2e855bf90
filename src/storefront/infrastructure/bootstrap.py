"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions handed to it here.

Lock registries live on the container: every handler built from one
container serializes on the same per-item and per-user locks.  Anything
that rewrites a catalog item must go through ``item_locks``, the
registry the stock ledger reserves under.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from storefront.application.add_product import AddProductHandler
from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.add_variant import AddVariantHandler
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.remove_cart_item import ClearCartHandler, RemoveCartItemHandler
from storefront.application.reorder import ReorderHandler
from storefront.application.set_stock import SetStockHandler
from storefront.application.show_cart import ShowCartHandler
from storefront.application.show_catalog import ShowCatalogHandler
from storefront.application.show_order import ListOrdersHandler, ShowOrderHandler
from storefront.application.update_cart_item import UpdateCartItemHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.keyed_lock import KeyedLock
from storefront.domain.service.payment_authorizer import PaymentAuthorizer
from storefront.domain.service.stock_ledger import StockLedger
from storefront.infrastructure.config import Settings
from storefront.infrastructure.payment.mock_payment_authorizer import MockPaymentAuthorizer
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)


@dataclass(frozen=True)
class Container:
    catalog_repo: CatalogRepository
    cart_repo: CartRepository
    order_repo: OrderRepository
    stock_ledger: StockLedger
    payment_authorizer: PaymentAuthorizer
    item_locks: KeyedLock
    cart_locks: KeyedLock

    @staticmethod
    def build(
        catalog_repo: CatalogRepository,
        cart_repo: CartRepository,
        order_repo: OrderRepository,
        payment_authorizer: PaymentAuthorizer | None = None,
    ) -> Container:
        item_locks = KeyedLock()
        return Container(
            catalog_repo=catalog_repo,
            cart_repo=cart_repo,
            order_repo=order_repo,
            stock_ledger=StockLedger(catalog_repo, item_locks),
            payment_authorizer=payment_authorizer or MockPaymentAuthorizer(),
            item_locks=item_locks,
            cart_locks=KeyedLock(),
        )

    # --- Handlers -------------------------------------------------------------

    def place_order(self) -> PlaceOrderHandler:
        return PlaceOrderHandler(
            cart_repo=self.cart_repo,
            catalog_repo=self.catalog_repo,
            order_repo=self.order_repo,
            stock_ledger=self.stock_ledger,
            payment_authorizer=self.payment_authorizer,
            cart_locks=self.cart_locks,
        )

    def add_to_cart(self) -> AddToCartHandler:
        return AddToCartHandler(self.cart_repo, self.catalog_repo, self.cart_locks)

    def update_cart_item(self) -> UpdateCartItemHandler:
        return UpdateCartItemHandler(self.cart_repo, self.catalog_repo, self.cart_locks)

    def remove_cart_item(self) -> RemoveCartItemHandler:
        return RemoveCartItemHandler(self.cart_repo, self.cart_locks)

    def clear_cart(self) -> ClearCartHandler:
        return ClearCartHandler(self.cart_repo, self.cart_locks)

    def show_cart(self) -> ShowCartHandler:
        return ShowCartHandler(self.cart_repo, self.catalog_repo)

    def reorder(self) -> ReorderHandler:
        return ReorderHandler(
            self.order_repo, self.cart_repo, self.catalog_repo, self.cart_locks
        )

    def show_order(self) -> ShowOrderHandler:
        return ShowOrderHandler(self.order_repo)

    def list_orders(self) -> ListOrdersHandler:
        return ListOrdersHandler(self.order_repo)

    def update_order_status(self) -> UpdateOrderStatusHandler:
        return UpdateOrderStatusHandler(self.order_repo)

    def add_product(self) -> AddProductHandler:
        return AddProductHandler(self.catalog_repo)

    def update_product(self) -> UpdateProductHandler:
        return UpdateProductHandler(self.catalog_repo, self.item_locks)

    def add_variant(self) -> AddVariantHandler:
        return AddVariantHandler(self.catalog_repo)

    def set_stock(self) -> SetStockHandler:
        return SetStockHandler(self.stock_ledger)

    def show_catalog(self) -> ShowCatalogHandler:
        return ShowCatalogHandler(self.catalog_repo)


def build_container(settings: Settings) -> Container:
    """JSON-file-backed container rooted at ``settings.data_dir``."""
    data_dir = settings.data_dir
    return Container.build(
        catalog_repo=JsonCatalogRepository(
            data_dir / "products.json", data_dir / "variants.json"
        ),
        cart_repo=JsonCartRepository(data_dir / "carts.json"),
        order_repo=JsonOrderRepository(data_dir / "orders.json"),
    )


@lru_cache(maxsize=1)
def default_container() -> Container:
    """Process-wide container configured from the environment (CLI)."""
    return build_container(Settings.from_env())
