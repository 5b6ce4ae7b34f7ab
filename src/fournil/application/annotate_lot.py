"""Application service: Annotate Lot use case.

Notes are the only part of a lot that may change after it is created.
"""

from __future__ import annotations

from fournil.domain.exceptions import EntityNotFoundError
from fournil.domain.model.lot import Lot
from fournil.domain.repository.unit_of_work import UnitOfWork


class AnnotateLotHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, lot_code: str, notes: str | None) -> Lot:
        with self._uow:
            lot = self._uow.lots.get_by_code(lot_code)
            if lot is None:
                raise EntityNotFoundError(f"Lot not found: '{lot_code}'")
            lot.annotate(notes)
            self._uow.lots.save(lot)
            self._uow.commit()
        return lot
