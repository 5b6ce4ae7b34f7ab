"""Application service: Add Storage Zone use case (master data seeding)."""

from __future__ import annotations

from fournil.application.item_resolver import parse_quantity
from fournil.domain.exceptions import ValidationError
from fournil.domain.model.article import StorageZone
from fournil.domain.repository.unit_of_work import UnitOfWork


class AddStorageZoneHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        code: str,
        name: str,
        capacity: str | None = None,
        unit: str | None = None,
    ) -> StorageZone:
        if not code or not code.strip():
            raise ValidationError("Zone code is required")
        with self._uow:
            if self._uow.zones.get_by_code(code) is not None:
                raise ValidationError(f"Storage zone '{code}' already exists")
            zone = StorageZone(
                id=self._uow.zones.next_id(),
                code=code.strip(),
                name=name.strip(),
                capacity=parse_quantity(capacity),
                unit=unit,
            )
            self._uow.zones.save(zone)
            self._uow.commit()
        return zone
