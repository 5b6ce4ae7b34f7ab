"""Application service: Set Operation Status use case."""

from __future__ import annotations

from fournil.application.dto import OperationDTO
from fournil.application.item_resolver import parse_datetime, parse_quantity, parse_status
from fournil.application.mapping import to_operation_dto
from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.domain.service.operation_lifecycle import OperationLifecycleManager


class SetOperationStatusHandler:

    def __init__(self, uow: UnitOfWork, **lifecycle_options) -> None:
        self._uow = uow
        self._options = lifecycle_options

    def handle(
        self,
        operation_id: int,
        status: str,
        privileged: bool = False,
        conform_quantity: str | None = None,
        waste_quantity: str | None = None,
        at: str | None = None,
    ) -> OperationDTO:
        """Move an operation to *status*.

        ``conform_quantity`` / ``waste_quantity`` describe what a production
        actually yielded and are only accepted when completing one.
        """
        with self._uow:
            manager = OperationLifecycleManager(self._uow, **self._options)
            outcome = manager.set_status(
                operation_id,
                parse_status(status),
                privileged=privileged,
                conform_quantity=parse_quantity(conform_quantity),
                waste_quantity=parse_quantity(waste_quantity),
                at=parse_datetime(at),
            )
            self._uow.commit()
            return to_operation_dto(self._uow, outcome.operation, outcome.warnings)
