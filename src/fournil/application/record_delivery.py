"""Application service: Record Partial Delivery use case."""

from __future__ import annotations

from fournil.application.dto import ReservationDTO
from fournil.application.item_resolver import parse_quantity
from fournil.application.mapping import to_reservation_dto
from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.domain.service.operation_lifecycle import OperationLifecycleManager


class RecordDeliveryHandler:

    def __init__(self, uow: UnitOfWork, **lifecycle_options) -> None:
        self._uow = uow
        self._options = lifecycle_options

    def handle(self, operation_id: int, reservation_id: int, quantity: str) -> ReservationDTO:
        with self._uow:
            manager = OperationLifecycleManager(self._uow, **self._options)
            manager.record_delivery(operation_id, reservation_id, parse_quantity(quantity))
            self._uow.commit()
            reservation = self._uow.reservations.get_by_id(reservation_id)
            return to_reservation_dto(self._uow, reservation)
