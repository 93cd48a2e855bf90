"""Application service: Set Stock use case."""

from __future__ import annotations

import structlog

from storefront.domain.service.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)


class SetStockHandler:

    def __init__(self, stock_ledger: StockLedger) -> None:
        self._stock = stock_ledger

    def handle(self, product_id: str, quantity: int) -> None:
        """Overwrite the stock level for a product (goods received, recount)."""
        item = self._stock.set_level(product_id, quantity)
        logger.info("Stock level set", product_id=item.id, quantity=item.stock_quantity)
