"""Domain service: Operation Lifecycle Manager.

Translates create / update / status / delete requests on inventory
operations into reservation writes and ledger movements. It works inside
the caller's unit of work and never commits: the application handler
commits once everything below has succeeded, so a failure anywhere leaves
neither the ledger nor the reservations half-written.

Writes that hold stock follow a two-phase approach:
  Phase 1: resolve and validate every outgoing line (excluding the
            operation's own holds). Fails before any mutation.
  Phase 2: write the reservations.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from fournil.domain.exceptions import (
    DomainWarning,
    EntityNotFoundError,
    InsufficientAvailability,
    ValidationError,
)
from fournil.domain.model.operation import (
    InventoryOperation,
    OperationItem,
    OperationStatus,
    OperationType,
)
from fournil.domain.model.reservation import Reservation, ReservationStatus
from fournil.domain.model.value_objects import ZERO, Allocation, Combination
from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.domain.service.allocator import Allocator
from fournil.domain.service.availability_calculator import AvailabilityCalculator
from fournil.domain.service.combination_validator import CombinationValidator
from fournil.domain.service.lot_generator import DEFAULT_ALERT_LEAD_DAYS, LotGenerator
from fournil.domain.service.reservation_store import ReservationStore
from fournil.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)

_HoldKey = tuple[int, Combination]


@dataclass
class OperationOutcome:
    """An operation after a lifecycle call, with any non-fatal warnings."""

    operation: InventoryOperation
    warnings: list[DomainWarning] = field(default_factory=list)


class OperationLifecycleManager:

    def __init__(
        self,
        uow: UnitOfWork,
        alert_lead_days: int = DEFAULT_ALERT_LEAD_DAYS,
        reservation_ttl: timedelta | None = None,
    ) -> None:
        self._uow = uow
        self.calculator = AvailabilityCalculator(uow.stock, uow.reservations)
        self.ledger = StockLedger(uow.stock)
        self.reservations = ReservationStore(uow.reservations, self.calculator, reservation_ttl)
        self._validator = CombinationValidator(self.calculator)
        self._allocator = Allocator(self.calculator, uow.lots)
        self._lot_generator = LotGenerator(uow.articles, uow.lots, alert_lead_days)

    # --- Operations -----------------------------------------------------------

    def create(
        self,
        operation_type: OperationType,
        items: list[OperationItem],
        status: OperationStatus = OperationStatus.DRAFT,
        scheduled_date: datetime | None = None,
        operator: str | None = None,
        notes: str | None = None,
        conform_quantity: Decimal | None = None,
        waste_quantity: Decimal | None = None,
    ) -> OperationOutcome:
        self._check_references(items)
        operation = InventoryOperation.create(
            operation_type,
            items,
            scheduled_date=scheduled_date,
            operator=operator,
            notes=notes,
        )
        operation.assign_identity(self._uow.operations.next_id())
        outcome = OperationOutcome(operation)

        if operation.is_reserving:
            self._reserve(operation)
        if status != OperationStatus.DRAFT:
            self._transition(
                operation, status, False, conform_quantity, waste_quantity, None, outcome
            )

        self._uow.operations.save(operation)
        logger.info(
            "Operation %s created (%s, %s)",
            operation.code, operation.type.value, operation.status.value,
        )
        return outcome

    def update_items(self, operation_id: int, items: list[OperationItem]) -> OperationOutcome:
        """Replace the items of an in-flight operation.

        Its own holds are excluded from validation, then reservations are
        resized, created or deleted to match the new lines.
        """
        operation = self._get(operation_id)
        operation.ensure_editable()
        self._check_references(items)
        operation.replace_items(items)

        if operation.is_reserving:
            planned = self._plan_allocations(operation)
            self._reconcile(operation, planned)

        self._uow.operations.save(operation)
        logger.info("Operation %s items updated", operation.code)
        return OperationOutcome(operation)

    def set_status(
        self,
        operation_id: int,
        new_status: OperationStatus,
        privileged: bool = False,
        conform_quantity: Decimal | None = None,
        waste_quantity: Decimal | None = None,
        at: datetime | None = None,
    ) -> OperationOutcome:
        operation = self._get(operation_id)
        outcome = OperationOutcome(operation)
        if operation.status == new_status and not operation.is_terminal:
            return outcome

        previous = operation.status
        self._transition(
            operation, new_status, privileged, conform_quantity, waste_quantity, at, outcome
        )
        self._uow.operations.save(operation)
        logger.info(
            "Operation %s %s -> %s",
            operation.code, previous.value, operation.status.value,
        )
        return outcome

    def delete(self, operation_id: int, privileged: bool = False) -> None:
        """Delete an operation with its items, lot links and reservations."""
        operation = self._get(operation_id)
        operation.ensure_deletable(privileged)
        if operation.status == OperationStatus.COMPLETED:
            self._reverse_completion(operation)
        removed = self.reservations.delete_all_for_operation(operation.id)
        self._uow.operations.delete(operation.id)
        logger.info(
            "Operation %s deleted with %d reservation(s)", operation.code, removed
        )

    def record_delivery(
        self, operation_id: int, reservation_id: int, quantity: Decimal
    ) -> Reservation:
        """Post a partial delivery: stock leaves now, the rest stays held."""
        operation = self._get(operation_id)
        operation.ensure_editable()
        if operation.type != OperationType.DELIVERY:
            raise ValidationError(
                f"Operation {operation.code} is a {operation.type.value}, not a delivery"
            )
        reservation = self._uow.reservations.get_by_id(reservation_id)
        if reservation is None or reservation.operation_id != operation.id:
            raise EntityNotFoundError(
                f"Reservation #{reservation_id} not found on operation {operation.code}"
            )
        if reservation.zone_id is None:
            raise ValidationError(
                f"Reservation #{reservation_id} is not scoped to a zone"
            )
        self.reservations.record_delivery(reservation_id, quantity)
        self.ledger.adjust(
            reservation.article_id, reservation.lot_id, reservation.zone_id, -quantity
        )
        return reservation

    # --- Transitions ----------------------------------------------------------

    def _transition(
        self,
        operation: InventoryOperation,
        new_status: OperationStatus,
        privileged: bool,
        conform_quantity: Decimal | None,
        waste_quantity: Decimal | None,
        at: datetime | None,
        outcome: OperationOutcome,
    ) -> None:
        operation.check_transition(new_status, privileged)
        if new_status != OperationStatus.COMPLETED and (
            conform_quantity is not None or waste_quantity is not None
        ):
            raise ValidationError("Produced quantities are only accepted on completion")

        was_reserving = operation.is_reserving
        will_reserve = operation.holds_reservations_in(new_status)
        previous = operation.status

        if new_status == OperationStatus.COMPLETED:
            self._complete(operation, conform_quantity, waste_quantity, at, outcome)
        elif new_status == OperationStatus.CANCELLED:
            if previous == OperationStatus.COMPLETED:
                self._reverse_completion(operation)
            else:
                self.reservations.release_all_for_operation(
                    operation.id, ReservationStatus.CANCELLED
                )
        elif will_reserve and not was_reserving:
            self._reserve(operation)
        elif was_reserving and not will_reserve:
            self.reservations.release_all_for_operation(operation.id)

        operation.transition_to(new_status, privileged, at)

    def _reserve(self, operation: InventoryOperation) -> None:
        planned = self._plan_allocations(operation)
        reservation_type = operation.profile.reservation_type
        for item, lines in planned:
            for line in lines:
                self.reservations.reserve(
                    operation.id,
                    item.article_id,
                    line.lot_id,
                    line.zone_id,
                    line.quantity,
                    reservation_type,
                    notes=f"Réservation pour {operation.code}",
                )

    def _plan_allocations(
        self, operation: InventoryOperation
    ) -> list[tuple[OperationItem, list[Allocation]]]:
        """Phase 1: resolve and validate every outgoing item; no writes."""
        planned: list[tuple[OperationItem, list[Allocation]]] = []
        delivered = self._delivered_so_far(operation)
        for item in operation.outbound_items:
            lines = self._allocator.resolve(item, operation.id)
            self._validator.validate(
                item.article_id,
                item.quantity,
                lines,
                operation.id,
                already_delivered={
                    combination: quantity
                    for (article_id, combination), quantity in delivered.items()
                    if article_id == item.article_id
                },
            )
            planned.append((item, lines))
        for item, lines in planned:
            item.allocations = lines
        return planned

    def _delivered_so_far(self, operation: InventoryOperation) -> dict[_HoldKey, Decimal]:
        """Quantities partial deliveries already took out of the ledger, per key."""
        delivered: dict[_HoldKey, Decimal] = defaultdict(lambda: ZERO)
        for reservation in self.reservations.for_operation(operation.id):
            if reservation.zone_id is not None and reservation.delivered_quantity > ZERO:
                delivered[(reservation.article_id, reservation.combination)] += (
                    reservation.delivered_quantity
                )
        return delivered

    def _reconcile(
        self,
        operation: InventoryOperation,
        planned: list[tuple[OperationItem, list[Allocation]]],
    ) -> None:
        """Phase 2 of an update: bring the holds in line with the new plan."""
        wanted: dict[_HoldKey, Decimal] = defaultdict(lambda: ZERO)
        for item, lines in planned:
            for line in lines:
                wanted[(item.article_id, line.combination)] += line.quantity

        current: dict[_HoldKey, list[Reservation]] = defaultdict(list)
        settled: dict[_HoldKey, Decimal] = defaultdict(lambda: ZERO)
        for reservation in self.reservations.for_operation(operation.id):
            key = (reservation.article_id, reservation.combination)
            if reservation.is_active:
                current[key].append(reservation)
            else:
                settled[key] += reservation.delivered_quantity

        # What closed reservations already delivered has left the ledger and
        # is not held again.
        for key, delivered in settled.items():
            if delivered <= ZERO:
                continue
            requested = wanted.get(key, ZERO)
            if requested < delivered:
                raise ValidationError(
                    f"Article #{key[0]} at {key[1]}: {delivered} already delivered, "
                    f"cannot lower the quantity to {requested}"
                )
            wanted[key] = requested - delivered
            if wanted[key] == ZERO:
                del wanted[key]

        for key, held in current.items():
            keep = held[0] if key in wanted else None
            for reservation in held:
                if reservation is keep:
                    continue
                if reservation.delivered_quantity > ZERO:
                    raise ValidationError(
                        f"Reservation #{reservation.id} is partially delivered "
                        f"and cannot be removed"
                    )
                self.reservations.delete(reservation.id)

        for key, quantity in wanted.items():
            if key in current:
                self.reservations.resize(current[key][0].id, quantity)

        reservation_type = operation.profile.reservation_type
        for (article_id, combination), quantity in wanted.items():
            if (article_id, combination) not in current:
                self.reservations.reserve(
                    operation.id,
                    article_id,
                    combination.lot_id,
                    combination.zone_id,
                    quantity,
                    reservation_type,
                    notes=f"Réservation pour {operation.code}",
                )

    def _complete(
        self,
        operation: InventoryOperation,
        conform_quantity: Decimal | None,
        waste_quantity: Decimal | None,
        at: datetime | None,
        outcome: OperationOutcome,
    ) -> None:
        profile = operation.profile
        if conform_quantity is not None or waste_quantity is not None:
            if not profile.produces_lot:
                raise ValidationError(
                    f"A {operation.type.value} does not take produced quantities"
                )
            if operation.main_product is None:
                raise ValidationError(
                    f"Operation {operation.code} has no output item to record "
                    f"produced quantities on"
                )
        completed_at = at or datetime.now(timezone.utc)

        # Quantities already posted by partial deliveries are not posted twice.
        credit = self._delivered_so_far(operation)

        outgoing: dict[_HoldKey, Decimal] = defaultdict(lambda: ZERO)
        for item in operation.outbound_items:
            lines = item.allocations or self._allocator.resolve(item, operation.id)
            item.allocations = list(lines)
            for line in lines:
                key = (item.article_id, line.combination)
                already = min(credit[key], line.quantity)
                credit[key] -= already
                outgoing[key] += line.quantity - already
        self._withdraw(outgoing, operation.id)

        if profile.reservation_type is not None:
            self._settle_reservations(operation)

        main_product = operation.main_product if profile.produces_lot else None
        for item in operation.inbound_items:
            if item.is_outbound:
                # Transfers land in the destination with the lots they left with.
                for line in item.allocations:
                    self.ledger.adjust(item.article_id, line.lot_id, item.to_zone_id, line.quantity)
                item.posted_quantity = item.quantity
            elif item is main_product:
                self._post_production(
                    operation, item, conform_quantity, waste_quantity, completed_at, outcome
                )
            else:
                self.ledger.adjust(item.article_id, item.lot_id, item.to_zone_id, item.quantity)
                item.posted_quantity = item.quantity

    def _post_production(
        self,
        operation: InventoryOperation,
        item: OperationItem,
        conform_quantity: Decimal | None,
        waste_quantity: Decimal | None,
        completed_at: datetime,
        outcome: OperationOutcome,
    ) -> None:
        conform = item.quantity if conform_quantity is None else conform_quantity
        waste = ZERO if waste_quantity is None else waste_quantity
        if conform < ZERO or waste < ZERO:
            raise ValidationError("Produced quantities cannot be negative")

        generation = self._lot_generator.generate_lot(
            operation.id, item.article_id, conform, waste, completed_at
        )
        outcome.warnings.extend(generation.warnings)
        if generation.link is not None:
            operation.link_lot(generation.link)
        if generation.lot is not None:
            item.lot_id = generation.lot.id
        if conform > ZERO:
            self.ledger.adjust(item.article_id, item.lot_id, item.to_zone_id, conform)
        item.posted_quantity = conform

    def _settle_reservations(self, operation: InventoryOperation) -> None:
        status = (
            ReservationStatus.DELIVERED
            if operation.type == OperationType.DELIVERY
            else ReservationStatus.RELEASED
        )
        self.reservations.release_all_for_operation(operation.id, status)

    def _reverse_completion(self, operation: InventoryOperation) -> None:
        """Undo the ledger movements of a completed operation.

        Incoming stock is taken back first: if it was consumed or promised
        to another operation since, the whole reversal is rejected.
        """
        incoming: dict[_HoldKey, Decimal] = defaultdict(lambda: ZERO)
        for item in operation.inbound_items:
            if item.is_outbound:
                for line in item.allocations:
                    incoming[(item.article_id, Combination(line.lot_id, item.to_zone_id))] += (
                        line.quantity
                    )
            elif item.posted_quantity:
                incoming[(item.article_id, Combination(item.lot_id, item.to_zone_id))] += (
                    item.posted_quantity
                )
        self._withdraw(incoming, operation.id)
        for item in operation.outbound_items:
            for line in item.allocations:
                self.ledger.adjust(item.article_id, line.lot_id, line.zone_id, line.quantity)
        logger.info("Ledger movements of operation %s reversed", operation.code)

    def _withdraw(self, quantities: dict[_HoldKey, Decimal], operation_id: int) -> None:
        """Take stock out of the ledger without eating into other operations' holds.

        Every key is checked before the first write.
        """
        for (article_id, combination), quantity in quantities.items():
            if quantity <= ZERO:
                continue
            available = self.calculator.available_at(article_id, combination, operation_id)
            if quantity > available:
                raise InsufficientAvailability(article_id, combination, quantity, available)
        for (article_id, combination), quantity in quantities.items():
            if quantity > ZERO:
                self.ledger.adjust(article_id, combination.lot_id, combination.zone_id, -quantity)

    # --- Internal helpers -----------------------------------------------------

    def _get(self, operation_id: int) -> InventoryOperation:
        operation = self._uow.operations.get_by_id(operation_id)
        if operation is None:
            raise EntityNotFoundError(f"Operation #{operation_id} not found")
        return operation

    def _check_references(self, items: list[OperationItem]) -> None:
        for item in items:
            if self._uow.articles.get_by_id(item.article_id) is None:
                raise EntityNotFoundError(f"Article #{item.article_id} not found")
            zone_ids = {item.from_zone_id, item.to_zone_id}
            zone_ids.update(line.zone_id for line in item.allocations)
            for zone_id in zone_ids - {None}:
                if self._uow.zones.get_by_id(zone_id) is None:
                    raise EntityNotFoundError(f"Storage zone #{zone_id} not found")
            lot_ids = {item.lot_id}
            lot_ids.update(line.lot_id for line in item.allocations)
            for lot_id in lot_ids - {None}:
                lot = self._uow.lots.get_by_id(lot_id)
                if lot is None:
                    raise EntityNotFoundError(f"Lot #{lot_id} not found")
                if lot.article_id != item.article_id:
                    raise ValidationError(
                        f"Lot {lot.code} does not belong to article #{item.article_id}"
                    )
