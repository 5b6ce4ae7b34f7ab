"""Domain service: Availability Calculator.

Derives, for one article, what is on hand, what is held by in-flight
operations and what remains available to promise, per (lot, zone)
combination and in total.

``exclude_operation_id`` is an explicit argument of every computation:
while an operation is being edited its own holds must not count against
it, otherwise shrinking or reshaping an allocation would be blocked by
itself.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal

from fournil.domain.exceptions import DataIntegrityAnomaly
from fournil.domain.model.value_objects import ZERO, Combination
from fournil.domain.repository.reservation_repository import ReservationRepository
from fournil.domain.repository.stock_repository import StockRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CombinationAvailability:
    lot_id: int | None
    zone_id: int | None
    stock: Decimal
    reserved: Decimal
    available: Decimal

    @property
    def combination(self) -> Combination:
        return Combination(self.lot_id, self.zone_id)


@dataclass(frozen=True)
class AvailabilitySummary:
    total_stock: Decimal
    total_reserved: Decimal
    total_available: Decimal


@dataclass
class AvailabilityReport:
    article_id: int
    exclude_operation_id: int | None
    per_combination: list[CombinationAvailability]
    summary: AvailabilitySummary
    anomalies: list[DataIntegrityAnomaly] = field(default_factory=list)

    def for_combination(self, combination: Combination) -> CombinationAvailability | None:
        for row in self.per_combination:
            if row.combination == combination:
                return row
        return None


class AvailabilityCalculator:

    def __init__(
        self,
        stock_repo: StockRepository,
        reservation_repo: ReservationRepository,
    ) -> None:
        self._stock_repo = stock_repo
        self._reservation_repo = reservation_repo

    def availability(
        self,
        article_id: int,
        exclude_operation_id: int | None,
        combinations: list[Combination] | None = None,
    ) -> AvailabilityReport:
        """Compute stock, reserved and available quantities for an article.

        Reservations that are not scoped to a zone hold stock at article
        level: they count in the summary but belong to no combination.
        """
        wanted = set(combinations) if combinations is not None else None

        stock: dict[Combination, Decimal] = defaultdict(lambda: ZERO)
        for entry in self._stock_repo.query(article_id):
            if wanted is None or entry.combination in wanted:
                stock[entry.combination] += entry.quantity

        reserved: dict[Combination, Decimal] = defaultdict(lambda: ZERO)
        unscoped = ZERO
        for reservation in self._reservation_repo.list_active_for_article(article_id):
            if reservation.operation_id == exclude_operation_id:
                continue
            if reservation.zone_id is None:
                unscoped += reservation.outstanding_quantity
                continue
            if wanted is None or reservation.combination in wanted:
                reserved[reservation.combination] += reservation.outstanding_quantity

        rows: list[CombinationAvailability] = []
        anomalies: list[DataIntegrityAnomaly] = []
        for combination in sorted(set(stock) | set(reserved), key=_sort_key):
            on_hand = stock.get(combination, ZERO)
            held = reserved.get(combination, ZERO)
            if held > ZERO and on_hand <= ZERO:
                anomaly = DataIntegrityAnomaly(article_id, combination, held)
                logger.warning("%s", anomaly)
                anomalies.append(anomaly)
            rows.append(
                CombinationAvailability(
                    lot_id=combination.lot_id,
                    zone_id=combination.zone_id,
                    stock=on_hand,
                    reserved=held,
                    available=max(on_hand - held, ZERO),
                )
            )

        total_stock = sum((row.stock for row in rows), ZERO)
        total_reserved = sum((row.reserved for row in rows), ZERO) + unscoped
        total_available = max(
            sum((row.available for row in rows), ZERO) - unscoped, ZERO
        )
        report = AvailabilityReport(
            article_id=article_id,
            exclude_operation_id=exclude_operation_id,
            per_combination=rows,
            summary=AvailabilitySummary(total_stock, total_reserved, total_available),
            anomalies=anomalies,
        )
        logger.debug(
            "Availability article=%s exclude=%s stock=%s reserved=%s available=%s",
            article_id, exclude_operation_id,
            total_stock, total_reserved, total_available,
        )
        return report

    def available_at(
        self,
        article_id: int,
        combination: Combination,
        exclude_operation_id: int | None,
    ) -> Decimal:
        """Quantity that can still be promised from one combination.

        Article-level holds are taken into account by capping at the
        article's total availability.
        """
        report = self.availability(article_id, exclude_operation_id)
        if combination.zone_id is None:
            return report.summary.total_available
        row = report.for_combination(combination)
        if row is None:
            return ZERO
        return min(row.available, report.summary.total_available)

    def anomalies(self) -> list[DataIntegrityAnomaly]:
        """Scan every article holding reservations (admin view)."""
        found: list[DataIntegrityAnomaly] = []
        for article_id in sorted(self._reservation_repo.list_article_ids()):
            found.extend(self.availability(article_id, None).anomalies)
        return found


def _sort_key(combination: Combination) -> tuple:
    return (
        combination.lot_id is None,
        combination.lot_id or 0,
        combination.zone_id is None,
        combination.zone_id or 0,
    )
