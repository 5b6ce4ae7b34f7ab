"""Domain-level exceptions and warnings.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Warnings (DomainWarning) are never raised out of a use case: the operation
goes through and the warning is attached to the result for display.
"""

from __future__ import annotations

from decimal import Decimal

from fournil.domain.model.value_objects import Combination


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


# ---------------------------------------------------------------------------
# Stock and allocation errors
# ---------------------------------------------------------------------------


class InsufficientStock(ValidationError):
    """A ledger adjustment would drive an on-hand quantity below zero."""

    def __init__(
        self,
        article_id: int,
        combination: Combination,
        on_hand: Decimal,
        delta: Decimal,
    ) -> None:
        self.article_id = article_id
        self.combination = combination
        self.on_hand = on_hand
        self.delta = delta
        super().__init__(
            f"Insufficient stock for article #{article_id} at {combination} "
            f"(on hand {on_hand}, adjustment {delta})"
        )


class InsufficientAvailability(ValidationError):
    """A reservation or allocation line exceeds what is available to promise."""

    def __init__(
        self,
        article_id: int,
        combination: Combination | None,
        requested: Decimal,
        available: Decimal,
    ) -> None:
        self.article_id = article_id
        self.combination = combination
        self.requested = requested
        self.available = available
        where = f" at {combination}" if combination is not None else ""
        super().__init__(
            f"Insufficient availability for article #{article_id}{where} "
            f"(need {requested}, have {available} available)"
        )


class DuplicateCombination(ValidationError):
    """Two allocation lines target the same (lot, zone) pair."""

    def __init__(self, article_id: int, combination: Combination) -> None:
        self.article_id = article_id
        self.combination = combination
        super().__init__(
            f"Duplicate combination {combination} for article #{article_id}"
        )


class QuantityMismatch(ValidationError):
    """Allocation lines do not add up to the requested quantity."""

    def __init__(
        self, article_id: int, requested: Decimal, allocated: Decimal
    ) -> None:
        self.article_id = article_id
        self.requested = requested
        self.allocated = allocated
        super().__init__(
            f"Allocated quantity {allocated} does not match requested "
            f"quantity {requested} for article #{article_id}"
        )


# ---------------------------------------------------------------------------
# Lifecycle guards
# ---------------------------------------------------------------------------


class InvalidTransition(ValidationError):
    """A status change is not allowed from the operation's current status."""


class OperationLocked(ValidationError):
    """An edit or delete was attempted on a completed or cancelled operation."""


# ---------------------------------------------------------------------------
# Non-fatal warnings
# ---------------------------------------------------------------------------


class DomainWarning(DomainException):
    """A recoverable condition reported alongside a successful result."""


class MissingShelfLife(DomainWarning):
    """A lot was generated for an article without a configured shelf life."""

    def __init__(self, article_code: str, lot_code: str) -> None:
        self.article_code = article_code
        self.lot_code = lot_code
        super().__init__(
            f"Article {article_code} has no shelf life; lot {lot_code} "
            f"was created without use-by or expiration dates"
        )


class DataIntegrityAnomaly(DomainWarning):
    """Active reservations point at a (lot, zone) holding no stock."""

    def __init__(
        self, article_id: int, combination: Combination, reserved: Decimal
    ) -> None:
        self.article_id = article_id
        self.combination = combination
        self.reserved = reserved
        super().__init__(
            f"Article #{article_id} has {reserved} reserved at {combination} "
            f"but no stock there"
        )
