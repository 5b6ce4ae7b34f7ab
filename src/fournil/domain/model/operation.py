"""InventoryOperation aggregate: a typed, stateful unit of stock work.

The operation owns its items and the links to the lots it produced.
Everything that differs between operation types (code prefix, which
statuses hold reservations, whether completion creates a lot, which item
directions are allowed) lives in the ``PROFILES`` table instead of being
branched on throughout the code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from fournil.domain.exceptions import (
    InvalidTransition,
    OperationLocked,
    ValidationError,
)
from fournil.domain.model.lot import OperationLot
from fournil.domain.model.reservation import ReservationType
from fournil.domain.model.value_objects import ZERO, Allocation


class OperationType(Enum):
    RECEPTION = "reception"
    PREPARATION = "preparation"
    PREPARATION_RELIQUAT = "preparation_reliquat"
    ADJUSTMENT = "adjustment"
    ADJUSTMENT_WASTE = "adjustment_waste"
    INITIAL_INVENTORY = "initial_inventory"
    INTERNAL_TRANSFER = "internal_transfer"
    DELIVERY = "delivery"


class OperationStatus(Enum):
    DRAFT = "draft"
    PROGRAMMED = "programmed"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({OperationStatus.COMPLETED, OperationStatus.CANCELLED})

# Ordinary transitions must strictly increase the rank.
_STATUS_RANK = {
    OperationStatus.DRAFT: 0,
    OperationStatus.PROGRAMMED: 1,
    OperationStatus.PENDING: 1,
    OperationStatus.IN_PROGRESS: 2,
    OperationStatus.COMPLETED: 3,
}


class Side(Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class OperationProfile:
    """Per-type effect table row."""

    prefix: str
    inbound: Side
    outbound: Side
    reservation_type: ReservationType | None = None
    reserving_statuses: frozenset[OperationStatus] = frozenset()
    produces_lot: bool = False


# Preparations hold ingredients only while programmed: once started the
# consumption is tracked directly on the operation. Deliveries hold their
# stock until they are completed or cancelled.
_PRODUCTION_RESERVING = frozenset({OperationStatus.PROGRAMMED, OperationStatus.PENDING})
_DELIVERY_RESERVING = frozenset(
    {
        OperationStatus.DRAFT,
        OperationStatus.PROGRAMMED,
        OperationStatus.PENDING,
        OperationStatus.IN_PROGRESS,
    }
)

PROFILES: dict[OperationType, OperationProfile] = {
    OperationType.RECEPTION: OperationProfile("REC", Side.REQUIRED, Side.FORBIDDEN),
    OperationType.INITIAL_INVENTORY: OperationProfile("INI", Side.REQUIRED, Side.FORBIDDEN),
    OperationType.ADJUSTMENT: OperationProfile("AJU", Side.OPTIONAL, Side.OPTIONAL),
    OperationType.ADJUSTMENT_WASTE: OperationProfile("REBF", Side.FORBIDDEN, Side.REQUIRED),
    OperationType.INTERNAL_TRANSFER: OperationProfile("INT", Side.REQUIRED, Side.REQUIRED),
    OperationType.DELIVERY: OperationProfile(
        "LIV",
        Side.FORBIDDEN,
        Side.REQUIRED,
        reservation_type=ReservationType.DELIVERY,
        reserving_statuses=_DELIVERY_RESERVING,
    ),
    OperationType.PREPARATION: OperationProfile(
        "PREP",
        Side.OPTIONAL,
        Side.OPTIONAL,
        reservation_type=ReservationType.PRODUCTION,
        reserving_statuses=_PRODUCTION_RESERVING,
        produces_lot=True,
    ),
    OperationType.PREPARATION_RELIQUAT: OperationProfile(
        "REL",
        Side.OPTIONAL,
        Side.OPTIONAL,
        reservation_type=ReservationType.PRODUCTION,
        reserving_statuses=_PRODUCTION_RESERVING,
        produces_lot=True,
    ),
}


@dataclass
class OperationItem:
    """One article line of an operation.

    An item with only a destination zone brings stock in; every other
    item takes stock out (a transfer does both). The allocation breakdown
    says which (lot, zone) combinations the outgoing quantity comes from;
    when it is empty the lifecycle manager resolves one.
    """

    article_id: int
    quantity: Decimal
    lot_id: int | None = None
    from_zone_id: int | None = None
    to_zone_id: int | None = None
    allocations: list[Allocation] = field(default_factory=list)
    notes: str | None = None
    # Set at completion: what actually reached the ledger on the way in.
    posted_quantity: Decimal | None = None

    def __post_init__(self) -> None:
        if self.quantity <= ZERO:
            raise ValidationError(
                f"Quantity for article #{self.article_id} must be positive"
            )
        for line in self.allocations:
            if line.quantity <= ZERO:
                raise ValidationError(
                    f"Allocation quantity for article #{self.article_id} "
                    f"at {line.combination} must be positive"
                )

    @property
    def is_inbound(self) -> bool:
        return self.to_zone_id is not None

    @property
    def is_outbound(self) -> bool:
        return (
            self.to_zone_id is None
            or self.from_zone_id is not None
            or bool(self.allocations)
        )

    def explicit_allocations(self) -> list[Allocation]:
        """Allocation lines given by the caller, if any."""
        if self.allocations:
            return list(self.allocations)
        if self.from_zone_id is not None:
            return [Allocation(self.lot_id, self.from_zone_id, self.quantity)]
        return []


@dataclass
class InventoryOperation:
    """Aggregate root for stock operations.

    Use ``InventoryOperation.create()`` for new operations; ``__init__``
    stays simple so the repository can reconstitute persisted ones.
    """

    id: int | None
    type: OperationType
    items: list[OperationItem]
    code: str | None = None
    status: OperationStatus = OperationStatus.DRAFT
    scheduled_date: datetime | None = None
    operator: str | None = None
    notes: str | None = None
    lots: list[OperationLot] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None
    completed_at: datetime | None = None

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        operation_type: OperationType,
        items: list[OperationItem],
        scheduled_date: datetime | None = None,
        operator: str | None = None,
        notes: str | None = None,
    ) -> InventoryOperation:
        operation = InventoryOperation(
            id=None,
            type=operation_type,
            items=[],
            scheduled_date=scheduled_date,
            operator=operator,
            notes=notes,
        )
        operation._set_items(items)
        return operation

    def assign_identity(self, operation_id: int) -> None:
        self.id = operation_id
        self.code = f"{self.profile.prefix}-{operation_id:06d}"

    # --- Derived state --------------------------------------------------------

    @property
    def profile(self) -> OperationProfile:
        return PROFILES[self.type]

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def holds_reservations_in(self, status: OperationStatus) -> bool:
        return status in self.profile.reserving_statuses

    @property
    def is_reserving(self) -> bool:
        return self.holds_reservations_in(self.status)

    @property
    def outbound_items(self) -> list[OperationItem]:
        return [item for item in self.items if item.is_outbound]

    @property
    def inbound_items(self) -> list[OperationItem]:
        return [item for item in self.items if item.is_inbound]

    @property
    def main_product(self) -> OperationItem | None:
        """The item a production operation turns into a lot."""
        inbound = self.inbound_items
        return inbound[0] if inbound else None

    # --- Guards and transitions -----------------------------------------------

    def check_transition(self, new_status: OperationStatus, privileged: bool = False) -> None:
        """Raise InvalidTransition unless ``status -> new_status`` is allowed."""
        current = self.status
        if new_status == OperationStatus.CANCELLED:
            if current == OperationStatus.CANCELLED:
                raise InvalidTransition(f"Operation {self.code} is already cancelled")
            if current == OperationStatus.COMPLETED and not privileged:
                raise InvalidTransition(
                    f"Operation {self.code} is completed; only a privileged "
                    f"user can cancel it"
                )
            return
        if self.is_terminal:
            raise InvalidTransition(
                f"Operation {self.code} is {current.value} and cannot move "
                f"to {new_status.value}"
            )
        if _STATUS_RANK[new_status] <= _STATUS_RANK[current]:
            raise InvalidTransition(
                f"Cannot move operation {self.code} from {current.value} "
                f"back to {new_status.value}"
            )

    def transition_to(
        self,
        new_status: OperationStatus,
        privileged: bool = False,
        at: datetime | None = None,
    ) -> None:
        self.check_transition(new_status, privileged)
        now = at or datetime.now(timezone.utc)
        self.status = new_status
        self.updated_at = now
        if new_status == OperationStatus.COMPLETED:
            self.completed_at = now

    def ensure_editable(self) -> None:
        if self.is_terminal:
            raise OperationLocked(
                f"Operation {self.code} is {self.status.value} and cannot be edited"
            )

    def ensure_deletable(self, privileged: bool = False) -> None:
        if self.is_terminal and not privileged:
            raise OperationLocked(
                f"Operation {self.code} is {self.status.value} and cannot be deleted"
            )

    def replace_items(self, items: list[OperationItem]) -> None:
        self.ensure_editable()
        self._set_items(items)
        self.updated_at = datetime.now(timezone.utc)

    def link_lot(self, link: OperationLot) -> None:
        self.lots.append(link)

    # --- Internal helpers -----------------------------------------------------

    def _set_items(self, items: list[OperationItem]) -> None:
        if not items:
            raise ValidationError("Operation must contain at least one item")
        profile = self.profile
        for item in items:
            self._check_side(item, item.is_inbound, profile.inbound, "incoming")
            self._check_side(item, item.is_outbound, profile.outbound, "outgoing")
        self.items = list(items)

    def _check_side(self, item: OperationItem, present: bool, rule: Side, label: str) -> None:
        if present and rule == Side.FORBIDDEN:
            raise ValidationError(
                f"A {self.type.value} cannot have {label} stock "
                f"(article #{item.article_id})"
            )
        if not present and rule == Side.REQUIRED:
            raise ValidationError(
                f"A {self.type.value} requires {label} stock "
                f"(article #{item.article_id})"
            )
