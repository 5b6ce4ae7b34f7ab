"""Domain service: resolve where an outgoing item takes its stock from.

Items that name their (lot, zone) lines keep them. Items without any
allocation are spread over the article's combinations first-expired,
first-out: lots expiring soonest first, stock without a lot last.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from fournil.domain.exceptions import InsufficientAvailability
from fournil.domain.model.operation import OperationItem
from fournil.domain.model.value_objects import ZERO, Allocation
from fournil.domain.repository.lot_repository import LotRepository
from fournil.domain.service.availability_calculator import (
    AvailabilityCalculator,
    CombinationAvailability,
)

_FAR_FUTURE = datetime.max


class Allocator:

    def __init__(self, calculator: AvailabilityCalculator, lot_repo: LotRepository) -> None:
        self._calculator = calculator
        self._lot_repo = lot_repo

    def resolve(self, item: OperationItem, exclude_operation_id: int | None) -> list[Allocation]:
        explicit = item.explicit_allocations()
        if explicit:
            return explicit
        return self.first_expired_first_out(
            item.article_id, item.quantity, exclude_operation_id
        )

    def first_expired_first_out(
        self, article_id: int, quantity: Decimal, exclude_operation_id: int | None
    ) -> list[Allocation]:
        report = self._calculator.availability(article_id, exclude_operation_id)
        budget = report.summary.total_available
        if quantity > budget:
            raise InsufficientAvailability(article_id, None, quantity, budget)

        lines: list[Allocation] = []
        remaining = quantity
        for row in sorted(report.per_combination, key=self._expiry_key):
            if remaining <= ZERO:
                break
            if row.zone_id is None or row.available <= ZERO:
                continue
            take = min(row.available, remaining)
            lines.append(Allocation(row.lot_id, row.zone_id, take))
            remaining -= take

        if remaining > ZERO:
            raise InsufficientAvailability(
                article_id, None, quantity, quantity - remaining
            )
        return lines

    def _expiry_key(self, row: CombinationAvailability) -> tuple:
        expires = _FAR_FUTURE
        has_lot = row.lot_id is not None
        if has_lot:
            lot = self._lot_repo.get_by_id(row.lot_id)
            if lot is not None and lot.expiration_date is not None:
                expires = lot.expiration_date.replace(tzinfo=None)
        return (not has_lot, expires, row.lot_id or 0, row.zone_id or 0)
