"""Data Transfer Objects: plain containers that cross layer boundaries.

Inputs reference master data by code (what users type); outputs carry
codes as well, with quantities kept as Decimal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class AllocationSpec:
    """Input: part of an item's quantity taken from one (lot, zone)."""

    zone_code: str
    quantity: str | Decimal
    lot_code: str | None = None


@dataclass(frozen=True)
class ItemSpec:
    """Input: one article line of an operation."""

    article_code: str
    quantity: str | Decimal
    lot_code: str | None = None
    from_zone: str | None = None
    to_zone: str | None = None
    allocations: tuple[AllocationSpec, ...] = ()
    notes: str | None = None


@dataclass(frozen=True)
class AllocationDTO:
    lot_code: str | None
    zone_code: str
    quantity: Decimal


@dataclass(frozen=True)
class OperationItemDTO:
    article_code: str
    quantity: Decimal
    lot_code: str | None
    from_zone: str | None
    to_zone: str | None
    allocations: list[AllocationDTO]


@dataclass(frozen=True)
class OperationLotDTO:
    lot_code: str
    produced_quantity: Decimal


@dataclass(frozen=True)
class OperationDTO:
    id: int
    code: str
    type: str
    status: str
    items: list[OperationItemDTO]
    lots: list[OperationLotDTO]
    scheduled_date: str | None
    created_at: str
    completed_at: str | None
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ReservationDTO:
    id: int
    operation_id: int
    article_code: str
    lot_code: str | None
    zone_code: str | None
    reserved_quantity: Decimal
    delivered_quantity: Decimal
    status: str
    reservation_type: str
    created_at: str


@dataclass(frozen=True)
class CombinationDTO:
    lot_code: str | None
    zone_code: str | None
    stock: Decimal
    reserved: Decimal
    available: Decimal


@dataclass(frozen=True)
class AvailabilityDTO:
    article_code: str
    exclude_operation_id: int | None
    per_combination: list[CombinationDTO]
    total_stock: Decimal
    total_reserved: Decimal
    total_available: Decimal
    anomalies: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class StockLineDTO:
    article_code: str
    lot_code: str | None
    zone_code: str
    quantity: Decimal
