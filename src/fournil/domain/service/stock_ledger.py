"""Domain service: Stock Ledger.

The single authoritative record of what physically exists. Rows are only
mutated through ``adjust``, and only from inside the unit of work of the
status transition that caused the movement.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from fournil.domain.model.stock import StockEntry
from fournil.domain.model.value_objects import ZERO
from fournil.domain.repository.stock_repository import ANY, StockRepository

logger = logging.getLogger(__name__)


class StockLedger:

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    def adjust(
        self,
        article_id: int,
        lot_id: int | None,
        zone_id: int,
        delta: Decimal,
    ) -> StockEntry:
        """Apply *delta* to the (article, lot, zone) row, creating it at 0.

        Raises InsufficientStock (and persists nothing) if the on-hand
        quantity would become negative.
        """
        entry = self._stock_repo.get(article_id, lot_id, zone_id)
        if entry is None:
            entry = StockEntry(article_id=article_id, lot_id=lot_id, zone_id=zone_id)
        entry.apply(delta)
        self._stock_repo.save(entry)
        logger.info(
            "Stock article=%s lot=%s zone=%s %s -> %s",
            article_id, lot_id, zone_id, delta, entry.quantity,
        )
        return entry

    def query(self, article_id: int, lot_id=ANY, zone_id=ANY) -> list[StockEntry]:
        return self._stock_repo.query(article_id, lot_id=lot_id, zone_id=zone_id)

    def on_hand(self, article_id: int, lot_id: int | None, zone_id: int) -> Decimal:
        entry = self._stock_repo.get(article_id, lot_id, zone_id)
        return entry.quantity if entry is not None else ZERO
