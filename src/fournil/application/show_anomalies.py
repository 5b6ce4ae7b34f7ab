"""Application service: Show Anomalies use case (admin query).

Lists active reservations pointing at a (lot, zone) that holds no stock.
They are reported, never corrected automatically.
"""

from __future__ import annotations

from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.domain.service.availability_calculator import AvailabilityCalculator


class ShowAnomaliesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[str]:
        with self._uow:
            calculator = AvailabilityCalculator(self._uow.stock, self._uow.reservations)
            return [str(anomaly) for anomaly in calculator.anomalies()]
