"""Lots and their link to the operation that produced them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal

AUTO_LOT_NOTES = "Lot généré automatiquement via production"


def format_lot_code(article_code: str, manufacturing_day: date, sequence: int) -> str:
    """``{ArticleCode}-{yyyyMMdd}-{seq}`` with a three-digit sequence."""
    return f"{article_code}-{manufacturing_day:%Y%m%d}-{sequence:03d}"


@dataclass
class Lot:
    """A traceable batch of one article.

    Immutable once created except for ``notes``. ``supplier_id`` is None
    for lots produced in-house.
    """

    id: int | None
    article_id: int
    code: str
    manufacturing_date: datetime | None = None
    use_date: datetime | None = None
    expiration_date: datetime | None = None
    alert_date: datetime | None = None
    supplier_id: int | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_internal(self) -> bool:
        return self.supplier_id is None

    def annotate(self, notes: str | None) -> None:
        """Replace the notes; blank text clears them."""
        if notes is not None:
            notes = notes.strip() or None
        self.notes = notes


@dataclass
class OperationLot:
    """Operation ↔ lot link carrying the quantity the operation produced."""

    id: int | None
    operation_id: int
    lot_id: int
    produced_quantity: Decimal
    notes: str | None = None
