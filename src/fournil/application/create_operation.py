"""Application service: Create Operation use case.

Resolves the codes of the request, lets the lifecycle manager validate
and reserve, and commits everything in one unit of work.
"""

from __future__ import annotations

from fournil.application.dto import ItemSpec, OperationDTO
from fournil.application.item_resolver import (
    parse_datetime,
    parse_quantity,
    parse_status,
    parse_type,
    resolve_items,
)
from fournil.application.mapping import to_operation_dto
from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.domain.service.operation_lifecycle import OperationLifecycleManager


class CreateOperationHandler:

    def __init__(self, uow: UnitOfWork, **lifecycle_options) -> None:
        self._uow = uow
        self._options = lifecycle_options

    def handle(
        self,
        operation_type: str,
        item_specs: list[ItemSpec],
        status: str = "draft",
        scheduled_date: str | None = None,
        operator: str | None = None,
        notes: str | None = None,
        conform_quantity: str | None = None,
        waste_quantity: str | None = None,
    ) -> OperationDTO:
        with self._uow:
            items = resolve_items(self._uow, item_specs)
            manager = OperationLifecycleManager(self._uow, **self._options)
            outcome = manager.create(
                parse_type(operation_type),
                items,
                status=parse_status(status),
                scheduled_date=parse_datetime(scheduled_date),
                operator=operator,
                notes=notes,
                conform_quantity=parse_quantity(conform_quantity),
                waste_quantity=parse_quantity(waste_quantity),
            )
            self._uow.commit()
            return to_operation_dto(self._uow, outcome.operation, outcome.warnings)
