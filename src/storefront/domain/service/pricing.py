"""Domain service: pricing.

``PriceCalculator`` resolves the effective unit price of a catalog item
with its selected variants.  ``summarize`` turns priced lines into the
subtotal / tax / total triple.

Rounding happens once, on the summary figures, never per line.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from storefront.domain.exceptions import UnknownVariantError
from storefront.domain.model.catalog import CatalogItem
from storefront.domain.model.value_objects import Customization, Money
from storefront.domain.repository.catalog_repository import CatalogRepository

TAX_RATE = Decimal("0.08")


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Money
    tax: Money
    total: Money


def summarize(lines: Iterable[tuple[Money, int]]) -> OrderTotals:
    """Compute totals from ``(unit_price, quantity)`` pairs.

    subtotal = sum(unit_price * quantity)
    tax      = subtotal * TAX_RATE
    total    = subtotal + tax
    each rounded half-up to cents from the unrounded figures.
    """
    subtotal = Money.zero()
    for unit_price, quantity in lines:
        subtotal = subtotal + unit_price * quantity

    tax = subtotal.scaled(TAX_RATE)
    total = subtotal + tax
    return OrderTotals(
        subtotal=subtotal.rounded(),
        tax=tax.rounded(),
        total=total.rounded(),
    )


class PriceCalculator:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def resolve_unit_price(
        self, item: CatalogItem, customization: Customization
    ) -> Money:
        """Base price plus the modifier of every selected variant.

        Raises UnknownVariantError if a variant does not exist, is
        inactive, or belongs to another item.  Has no side effects.
        """
        delta = Decimal("0")
        for variant_id in customization:
            variant = self._catalog_repo.get_variant(variant_id)
            if variant is None or not variant.is_active or not variant.belongs_to(item.id):
                raise UnknownVariantError(variant_id, item.id)
            delta += variant.price_modifier
        # Only the final price must be non-negative, not each partial sum.
        return item.base_price.adjusted(delta)
