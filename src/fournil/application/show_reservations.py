"""Application service: Show Reservations use case (query)."""

from __future__ import annotations

from fournil.application.dto import ReservationDTO
from fournil.application.mapping import to_reservation_dto
from fournil.domain.exceptions import EntityNotFoundError
from fournil.domain.repository.unit_of_work import UnitOfWork


class ShowReservationsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, operation_id: int) -> list[ReservationDTO]:
        with self._uow:
            if self._uow.operations.get_by_id(operation_id) is None:
                raise EntityNotFoundError(f"Operation #{operation_id} not found")
            return [
                to_reservation_dto(self._uow, reservation)
                for reservation in self._uow.reservations.list_for_operation(operation_id)
            ]
