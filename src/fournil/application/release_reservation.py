"""Application service: Release Reservation use case."""

from __future__ import annotations

from fournil.application.dto import ReservationDTO
from fournil.application.mapping import to_reservation_dto
from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.domain.service.availability_calculator import AvailabilityCalculator
from fournil.domain.service.reservation_store import ReservationStore


class ReleaseReservationHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, reservation_id: int) -> ReservationDTO:
        with self._uow:
            calculator = AvailabilityCalculator(self._uow.stock, self._uow.reservations)
            store = ReservationStore(self._uow.reservations, calculator)
            reservation = store.release(reservation_id)
            self._uow.commit()
            return to_reservation_dto(self._uow, reservation)
