"""Application service: Show Operation use case (query)."""

from __future__ import annotations

from fournil.application.dto import OperationDTO
from fournil.application.mapping import to_operation_dto
from fournil.domain.exceptions import EntityNotFoundError
from fournil.domain.repository.unit_of_work import UnitOfWork


class ShowOperationHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, operation_id: int) -> OperationDTO:
        with self._uow:
            operation = self._uow.operations.get_by_id(operation_id)
            if operation is None:
                raise EntityNotFoundError(f"Operation #{operation_id} not found")
            return to_operation_dto(self._uow, operation)
