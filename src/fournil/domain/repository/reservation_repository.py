"""Abstract repository for Reservation records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from fournil.domain.model.reservation import Reservation


class ReservationRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Reserve and return the next unique reservation ID."""

    @abstractmethod
    def get_by_id(self, reservation_id: int) -> Reservation | None:
        """Return a reservation by its ID, or None if not found."""

    @abstractmethod
    def list_for_operation(self, operation_id: int) -> list[Reservation]:
        """Return every reservation owned by an operation, active or not."""

    @abstractmethod
    def list_active_for_article(self, article_id: int) -> list[Reservation]:
        """Return the reservations of an article that still hold stock."""

    @abstractmethod
    def list_article_ids(self) -> list[int]:
        """Return the IDs of every article with an active reservation."""

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """Persist a new or updated reservation."""

    @abstractmethod
    def delete(self, reservation_id: int) -> None:
        """Remove a reservation for good."""
