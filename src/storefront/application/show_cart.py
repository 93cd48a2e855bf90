"""Application service: Show Cart use case (query).

Prices every line against the current catalog.  Lines that can no
longer be bought (item switched off, variant withdrawn) are still
listed, flagged unavailable, and left out of the summary.
"""

from __future__ import annotations

from storefront.application.dto import CartDTO, CartLineDTO, format_amount
from storefront.domain.exceptions import UnknownVariantError
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.service.pricing import PriceCalculator, summarize


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository, catalog_repo: CatalogRepository) -> None:
        self._cart_repo = cart_repo
        self._catalog_repo = catalog_repo
        self._pricing = PriceCalculator(catalog_repo)

    def handle(self, user_id: str) -> CartDTO:
        cart = self._cart_repo.get(user_id)

        items: list[CartLineDTO] = []
        priced = []
        for line in cart.lines:
            item = self._catalog_repo.get_item(line.product_id)
            if item is None or not item.is_active:
                items.append(CartLineDTO.unavailable(line, item.name if item else line.product_id))
                continue
            try:
                unit_price = self._pricing.resolve_unit_price(item, line.customization)
            except UnknownVariantError:
                items.append(CartLineDTO.unavailable(line, item.name))
                continue

            priced.append((unit_price, line.quantity.value))
            items.append(
                CartLineDTO(
                    id=line.id,
                    product_id=item.id,
                    product_name=item.name,
                    quantity=line.quantity.value,
                    variant_ids=line.customization.to_list(),
                    unit_price=format_amount(unit_price),
                    line_total=format_amount(unit_price * line.quantity.value),
                    available=True,
                )
            )

        totals = summarize(priced)
        return CartDTO(
            items=items,
            subtotal=format_amount(totals.subtotal),
            tax=format_amount(totals.tax),
            total=format_amount(totals.total),
            item_count=sum(quantity for _, quantity in priced),
        )
