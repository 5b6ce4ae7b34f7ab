"""Reservation: a provisional hold of stock owned by one operation.

A reservation tracks what was promised (``reserved_quantity``) separately
from what has already left the shelf (``delivered_quantity``), so a partial
delivery keeps holding the remainder until the delivery is done.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from fournil.domain.exceptions import ValidationError
from fournil.domain.model.value_objects import ZERO, Combination


class ReservationStatus(Enum):
    RESERVED = "reserved"
    DELIVERED = "delivered"
    RELEASED = "released"
    CANCELLED = "cancelled"


class ReservationType(Enum):
    DELIVERY = "delivery"
    PRODUCTION = "production"


@dataclass
class Reservation:
    """Invariants:
    - ``reserved_quantity`` is strictly positive
    - ``delivered_quantity`` never exceeds ``reserved_quantity``
    - only RESERVED reservations hold stock
    """

    id: int | None
    operation_id: int
    article_id: int
    lot_id: int | None
    zone_id: int | None
    reserved_quantity: Decimal
    reservation_type: ReservationType
    delivered_quantity: Decimal = ZERO
    status: ReservationStatus = ReservationStatus.RESERVED
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.reserved_quantity <= ZERO:
            raise ValidationError("Reserved quantity must be positive")

    @property
    def combination(self) -> Combination:
        return Combination(self.lot_id, self.zone_id)

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.RESERVED

    @property
    def outstanding_quantity(self) -> Decimal:
        """Quantity still held against the ledger."""
        if not self.is_active:
            return ZERO
        return self.reserved_quantity - self.delivered_quantity

    def resize(self, quantity: Decimal) -> None:
        if not self.is_active:
            raise ValidationError(
                f"Reservation #{self.id} is {self.status.value} and cannot be resized"
            )
        if quantity <= ZERO:
            raise ValidationError("Reserved quantity must be positive")
        if quantity < self.delivered_quantity:
            raise ValidationError(
                f"Cannot reduce reservation #{self.id} to {quantity} "
                f"({self.delivered_quantity} already delivered)"
            )
        self.reserved_quantity = quantity

    def record_delivery(self, quantity: Decimal) -> None:
        """Record that *quantity* left the shelf against this hold."""
        if not self.is_active:
            raise ValidationError(
                f"Reservation #{self.id} is {self.status.value}, nothing to deliver"
            )
        if quantity <= ZERO:
            raise ValidationError("Delivered quantity must be positive")
        if quantity > self.outstanding_quantity:
            raise ValidationError(
                f"Cannot deliver {quantity} on reservation #{self.id} "
                f"(only {self.outstanding_quantity} outstanding)"
            )
        self.delivered_quantity += quantity
        if self.delivered_quantity >= self.reserved_quantity:
            self.status = ReservationStatus.DELIVERED

    def release(self, status: ReservationStatus = ReservationStatus.RELEASED) -> bool:
        """Stop holding stock. Returns False if it was already inactive."""
        if status == ReservationStatus.RESERVED:
            raise ValidationError("Release status must be an inactive status")
        if not self.is_active:
            return False
        self.status = status
        return True
