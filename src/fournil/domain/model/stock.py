"""StockEntry: the ledger row for (article, lot-or-none, zone)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from fournil.domain.exceptions import InsufficientStock
from fournil.domain.model.value_objects import ZERO, Combination


@dataclass
class StockEntry:
    """Physical on-hand quantity for one (article, lot, zone) key.

    Invariant: ``quantity`` is never negative.
    """

    article_id: int
    lot_id: int | None
    zone_id: int
    quantity: Decimal = ZERO
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def combination(self) -> Combination:
        return Combination(self.lot_id, self.zone_id)

    @property
    def key(self) -> tuple[int, int | None, int]:
        return (self.article_id, self.lot_id, self.zone_id)

    def apply(self, delta: Decimal) -> None:
        """Add *delta* (positive or negative) to the on-hand quantity."""
        result = self.quantity + delta
        if result < ZERO:
            raise InsufficientStock(
                self.article_id, self.combination, self.quantity, delta
            )
        self.quantity = result
        self.updated_at = datetime.now(timezone.utc)
