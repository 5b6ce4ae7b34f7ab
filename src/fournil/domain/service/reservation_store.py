"""Domain service: Reservation Store.

Creates, resizes and releases the provisional holds operations place on
stock. Every write checks availability in the same unit of work as the
insert, so two requests can never both promise the last units of a
(lot, zone) combination.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from fournil.domain.exceptions import EntityNotFoundError, InsufficientAvailability
from fournil.domain.model.reservation import (
    Reservation,
    ReservationStatus,
    ReservationType,
)
from fournil.domain.model.value_objects import Combination
from fournil.domain.repository.reservation_repository import ReservationRepository
from fournil.domain.service.availability_calculator import AvailabilityCalculator

logger = logging.getLogger(__name__)


class ReservationStore:

    def __init__(
        self,
        reservation_repo: ReservationRepository,
        calculator: AvailabilityCalculator,
        ttl: timedelta | None = None,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._calculator = calculator
        self._ttl = ttl

    def reserve(
        self,
        operation_id: int,
        article_id: int,
        lot_id: int | None,
        zone_id: int | None,
        quantity: Decimal,
        reservation_type: ReservationType = ReservationType.DELIVERY,
        notes: str | None = None,
    ) -> Reservation:
        """Hold *quantity* of an article at (lot, zone) for an operation.

        Other holds of the same operation count against the new one: an
        operation that wants more at a key should resize, not stack.
        """
        combination = Combination(lot_id, zone_id)
        available = self._calculator.available_at(article_id, combination, None)
        if quantity > available:
            raise InsufficientAvailability(article_id, combination, quantity, available)

        now = datetime.now(timezone.utc)
        reservation = Reservation(
            id=self._reservation_repo.next_id(),
            operation_id=operation_id,
            article_id=article_id,
            lot_id=lot_id,
            zone_id=zone_id,
            reserved_quantity=quantity,
            reservation_type=reservation_type,
            created_at=now,
            expires_at=now + self._ttl if self._ttl is not None else None,
            notes=notes,
        )
        self._reservation_repo.save(reservation)
        logger.info(
            "Reserved %s of article #%s at %s for operation #%s",
            quantity, article_id, combination, operation_id,
        )
        return reservation

    def resize(self, reservation_id: int, quantity: Decimal) -> Reservation:
        """Change the held quantity, ignoring the owner's own holds."""
        reservation = self._get(reservation_id)
        growth = quantity - reservation.reserved_quantity
        if growth > 0:
            available = self._calculator.available_at(
                reservation.article_id,
                reservation.combination,
                reservation.operation_id,
            )
            others_free = available - self._own_hold_elsewhere(reservation)
            if quantity - reservation.delivered_quantity > others_free:
                raise InsufficientAvailability(
                    reservation.article_id,
                    reservation.combination,
                    quantity,
                    others_free + reservation.delivered_quantity,
                )
        reservation.resize(quantity)
        self._reservation_repo.save(reservation)
        return reservation

    def release(
        self,
        reservation_id: int,
        status: ReservationStatus = ReservationStatus.RELEASED,
    ) -> Reservation:
        reservation = self._get(reservation_id)
        if reservation.release(status):
            self._reservation_repo.save(reservation)
            logger.info("Reservation #%s %s", reservation_id, status.value)
        return reservation

    def release_all_for_operation(
        self,
        operation_id: int,
        status: ReservationStatus = ReservationStatus.RELEASED,
    ) -> list[Reservation]:
        released: list[Reservation] = []
        for reservation in self._reservation_repo.list_for_operation(operation_id):
            if reservation.release(status):
                self._reservation_repo.save(reservation)
                released.append(reservation)
        if released:
            logger.info(
                "Released %d reservation(s) of operation #%s as %s",
                len(released), operation_id, status.value,
            )
        return released

    def delete_all_for_operation(self, operation_id: int) -> int:
        reservations = self._reservation_repo.list_for_operation(operation_id)
        for reservation in reservations:
            self._reservation_repo.delete(reservation.id)
        return len(reservations)

    def delete(self, reservation_id: int) -> None:
        self._get(reservation_id)
        self._reservation_repo.delete(reservation_id)

    def record_delivery(self, reservation_id: int, quantity: Decimal) -> Reservation:
        reservation = self._get(reservation_id)
        reservation.record_delivery(quantity)
        self._reservation_repo.save(reservation)
        return reservation

    def for_operation(self, operation_id: int) -> list[Reservation]:
        return self._reservation_repo.list_for_operation(operation_id)

    # --- Internal helpers -----------------------------------------------------

    def _get(self, reservation_id: int) -> Reservation:
        reservation = self._reservation_repo.get_by_id(reservation_id)
        if reservation is None:
            raise EntityNotFoundError(f"Reservation #{reservation_id} not found")
        return reservation

    def _own_hold_elsewhere(self, reservation: Reservation) -> Decimal:
        """Outstanding holds of the same operation at the same key, other rows."""
        return sum(
            (
                other.outstanding_quantity
                for other in self._reservation_repo.list_for_operation(
                    reservation.operation_id
                )
                if other.id != reservation.id
                and other.article_id == reservation.article_id
                and other.combination == reservation.combination
            ),
            Decimal("0"),
        )
