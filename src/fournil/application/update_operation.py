"""Application service: Update Operation use case.

The operation's own reservations are excluded while the new lines are
validated, so shrinking or reshaping an allocation is never blocked by
the allocation being replaced.
"""

from __future__ import annotations

from fournil.application.dto import ItemSpec, OperationDTO
from fournil.application.item_resolver import resolve_items
from fournil.application.mapping import to_operation_dto
from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.domain.service.operation_lifecycle import OperationLifecycleManager


class UpdateOperationHandler:

    def __init__(self, uow: UnitOfWork, **lifecycle_options) -> None:
        self._uow = uow
        self._options = lifecycle_options

    def handle(self, operation_id: int, item_specs: list[ItemSpec]) -> OperationDTO:
        with self._uow:
            items = resolve_items(self._uow, item_specs)
            manager = OperationLifecycleManager(self._uow, **self._options)
            outcome = manager.update_items(operation_id, items)
            self._uow.commit()
            return to_operation_dto(self._uow, outcome.operation, outcome.warnings)
