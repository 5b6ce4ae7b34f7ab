"""Domain service: Combination Validator.

Checks a multi-line (lot, zone) allocation before anything is written.
"""

from __future__ import annotations

from decimal import Decimal

from fournil.domain.exceptions import (
    DuplicateCombination,
    InsufficientAvailability,
    QuantityMismatch,
)
from fournil.domain.model.value_objects import ZERO, Allocation, Combination
from fournil.domain.service.availability_calculator import AvailabilityCalculator


class CombinationValidator:

    def __init__(self, calculator: AvailabilityCalculator) -> None:
        self._calculator = calculator

    def validate(
        self,
        article_id: int,
        requested_quantity: Decimal,
        lines: list[Allocation],
        exclude_operation_id: int | None,
        already_delivered: dict[Combination, Decimal] | None = None,
    ) -> None:
        """Raise on the first broken rule; return None when the lines are valid.

        Rules, in order: unique combinations, exact total, and every line
        within what its combination can still promise. Quantities in
        ``already_delivered`` have left the ledger and only the rest of a
        line needs to be available.
        """
        already_delivered = already_delivered or {}
        seen: set[Combination] = set()
        for line in lines:
            if line.combination in seen:
                raise DuplicateCombination(article_id, line.combination)
            seen.add(line.combination)

        allocated = sum((line.quantity for line in lines), ZERO)
        if allocated != requested_quantity:
            raise QuantityMismatch(article_id, requested_quantity, allocated)

        for line in lines:
            available = self._calculator.available_at(
                article_id, line.combination, exclude_operation_id
            )
            needed = line.quantity - already_delivered.get(line.combination, ZERO)
            if needed > available:
                raise InsufficientAvailability(
                    article_id, line.combination, needed, available
                )
