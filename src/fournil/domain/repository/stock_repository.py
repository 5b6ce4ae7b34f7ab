"""Abstract repository for StockEntry ledger rows."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fournil.domain.model.stock import StockEntry

# Sentinel for "do not filter on this column"; None is a real lot value.
ANY = object()


class StockRepository(ABC):

    @abstractmethod
    def get(self, article_id: int, lot_id: int | None, zone_id: int) -> StockEntry | None:
        """Return the entry for an exact key, or None."""

    @abstractmethod
    def query(self, article_id: int, lot_id=ANY, zone_id=ANY) -> list[StockEntry]:
        """Return every entry of an article, optionally filtered by lot/zone."""

    @abstractmethod
    def list_article_ids(self) -> list[int]:
        """Return the IDs of every article that has at least one entry."""

    @abstractmethod
    def save(self, entry: StockEntry) -> None:
        """Persist a new or updated entry (keyed by article, lot, zone)."""
