"""Application service: Delete Operation use case.

Items, lot links and reservations are removed in the same unit of work
as the operation itself.
"""

from __future__ import annotations

from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.domain.service.operation_lifecycle import OperationLifecycleManager


class DeleteOperationHandler:

    def __init__(self, uow: UnitOfWork, **lifecycle_options) -> None:
        self._uow = uow
        self._options = lifecycle_options

    def handle(self, operation_id: int, privileged: bool = False) -> None:
        with self._uow:
            manager = OperationLifecycleManager(self._uow, **self._options)
            manager.delete(operation_id, privileged=privileged)
            self._uow.commit()
