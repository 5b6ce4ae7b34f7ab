"""Application service: Show Availability use case (query).

``exclude_operation_id`` is passed by screens editing an existing
operation, so the user sees availability as if their own pending
allocation did not exist.
"""

from __future__ import annotations

from fournil.application.dto import AvailabilityDTO
from fournil.application.item_resolver import article_by_code
from fournil.application.mapping import to_availability_dto
from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.domain.service.availability_calculator import AvailabilityCalculator


class ShowAvailabilityHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, article_code: str, exclude_operation_id: int | None = None) -> AvailabilityDTO:
        with self._uow:
            article = article_by_code(self._uow, article_code)
            calculator = AvailabilityCalculator(self._uow.stock, self._uow.reservations)
            report = calculator.availability(article.id, exclude_operation_id)
            return to_availability_dto(self._uow, report)
