"""Abstract repository for InventoryOperation aggregate.

Items and lot links are part of the aggregate: saving or deleting an
operation saves or deletes them with it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from fournil.domain.model.operation import InventoryOperation


class OperationRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Reserve and return the next unique operation ID."""

    @abstractmethod
    def get_by_id(self, operation_id: int) -> InventoryOperation | None:
        """Return an operation by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[InventoryOperation]:
        """Return every operation."""

    @abstractmethod
    def save(self, operation: InventoryOperation) -> None:
        """Persist a new or updated operation with its items and lot links."""

    @abstractmethod
    def delete(self, operation_id: int) -> None:
        """Remove an operation with its items and lot links."""
