"""Abstract repository for Lot records and operation ↔ lot links."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from fournil.domain.model.lot import Lot


class LotRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Reserve and return the next unique lot ID."""

    @abstractmethod
    def get_by_id(self, lot_id: int) -> Lot | None:
        """Return a lot by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> Lot | None:
        """Return a lot by its code, or None if not found."""

    @abstractmethod
    def list_for_article(self, article_id: int) -> list[Lot]:
        """Return every lot of an article."""

    @abstractmethod
    def count_for_article_on(self, article_id: int, day: date) -> int:
        """Count the lots of an article manufactured on a calendar day."""

    @abstractmethod
    def save(self, lot: Lot) -> None:
        """Persist a new or updated lot."""

    @abstractmethod
    def next_link_id(self) -> int:
        """Reserve and return the next unique operation-lot link ID."""
