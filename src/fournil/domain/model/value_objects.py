"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")


def to_decimal(value: str | float | int | Decimal) -> Decimal:
    """Coerce a user-supplied number to Decimal without float artefacts.

    Raises ValueError for anything that is not a finite number; callers in
    the domain translate it into a ValidationError.
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Invalid quantity: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid quantity: {value!r}")
    return result


@dataclass(frozen=True, order=True)
class Combination:
    """A (lot, zone) pair used to allocate part of a requested quantity.

    ``lot_id`` is None for untracked stock; ``zone_id`` is None only for
    reservations that were not scoped to a zone.
    """

    lot_id: int | None
    zone_id: int | None

    def __str__(self) -> str:
        lot = f"lot #{self.lot_id}" if self.lot_id is not None else "no lot"
        zone = f"zone #{self.zone_id}" if self.zone_id is not None else "any zone"
        return f"({lot}, {zone})"


@dataclass(frozen=True)
class Allocation:
    """Part of an item's quantity drawn from one (lot, zone) combination."""

    lot_id: int | None
    zone_id: int
    quantity: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.quantity, Decimal):
            object.__setattr__(self, "quantity", to_decimal(self.quantity))

    @property
    def combination(self) -> Combination:
        return Combination(self.lot_id, self.zone_id)
