"""Unit of Work: one atomic transaction against the backing store.

Every write use case runs inside ``with uow:``. Changes become visible to
other requests only when ``commit()`` is called; leaving the block
without committing discards them, so a failed validation or a ledger
error never leaves a partial write behind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fournil.domain.repository.article_repository import (
    ArticleRepository,
    StorageZoneRepository,
)
from fournil.domain.repository.lot_repository import LotRepository
from fournil.domain.repository.operation_repository import OperationRepository
from fournil.domain.repository.reservation_repository import ReservationRepository
from fournil.domain.repository.stock_repository import StockRepository


class UnitOfWork(ABC):

    articles: ArticleRepository
    zones: StorageZoneRepository
    stock: StockRepository
    reservations: ReservationRepository
    lots: LotRepository
    operations: OperationRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._end()

    @abstractmethod
    def _begin(self) -> None:
        """Take the store lock and load a working snapshot."""

    @abstractmethod
    def _end(self) -> None:
        """Give the store lock back."""

    @abstractmethod
    def commit(self) -> None:
        """Make every change of this unit of work durable at once."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes (no-op after a commit)."""
