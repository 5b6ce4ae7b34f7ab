"""Master data consumed by the engine: articles and storage zones.

Both are owned by the catalog screens of the ERP; the engine only reads
them, except for the shelf-life policy which the lot generator applies.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from fournil.domain.exceptions import ValidationError


@dataclass
class Article:
    """A trackable product or ingredient.

    ``shelf_life_days`` may change over time; lots already generated keep
    the dates computed when they were created.
    """

    id: int
    code: str
    name: str
    unit: str = "kg"
    perishable: bool = False
    shelf_life_days: int | None = None

    def __post_init__(self) -> None:
        if not self.code or not self.code.strip():
            raise ValidationError("Article code is required")
        if self.shelf_life_days is not None and self.shelf_life_days < 0:
            raise ValidationError("Shelf life cannot be negative")

    def update_shelf_life(self, days: int | None) -> None:
        if days is not None and days < 0:
            raise ValidationError("Shelf life cannot be negative")
        self.shelf_life_days = days


@dataclass
class StorageZone:
    """A named physical location; every stock quantity lives in one."""

    id: int
    code: str
    name: str
    capacity: Decimal | None = None
    unit: str | None = None
