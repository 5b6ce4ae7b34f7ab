"""JSON-backed implementation of OperationRepository.

Items and lot links are stored inside the operation record, so deleting
the record removes them in the same write.
"""

from __future__ import annotations

from decimal import Decimal

from fournil.domain.model.lot import OperationLot
from fournil.domain.model.operation import (
    InventoryOperation,
    OperationItem,
    OperationStatus,
    OperationType,
)
from fournil.domain.model.value_objects import Allocation
from fournil.domain.repository.operation_repository import OperationRepository
from fournil.infrastructure.persistence.json_table import (
    JsonTable,
    dump_datetime,
    dump_decimal,
    load_datetime,
    load_decimal,
)


class JsonOperationRepository(JsonTable, OperationRepository):

    table = "operations"

    def next_id(self) -> int:
        return self._next()

    def get_by_id(self, operation_id: int) -> InventoryOperation | None:
        for raw in self._rows:
            if raw["id"] == operation_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[InventoryOperation]:
        return [self._to_domain(raw) for raw in self._rows]

    def save(self, operation: InventoryOperation) -> None:
        if operation.id is None:
            operation.assign_identity(self.next_id())
        self._upsert(self._to_raw(operation), lambda raw: raw["id"] == operation.id)

    def delete(self, operation_id: int) -> None:
        self._rows[:] = [raw for raw in self._rows if raw["id"] != operation_id]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(operation: InventoryOperation) -> dict:
        return {
            "id": operation.id,
            "code": operation.code,
            "type": operation.type.value,
            "status": operation.status.value,
            "scheduled_date": dump_datetime(operation.scheduled_date),
            "operator": operation.operator,
            "notes": operation.notes,
            "created_at": dump_datetime(operation.created_at),
            "updated_at": dump_datetime(operation.updated_at),
            "completed_at": dump_datetime(operation.completed_at),
            "items": [
                {
                    "article_id": item.article_id,
                    "quantity": str(item.quantity),
                    "lot_id": item.lot_id,
                    "from_zone_id": item.from_zone_id,
                    "to_zone_id": item.to_zone_id,
                    "allocations": [
                        {
                            "lot_id": line.lot_id,
                            "zone_id": line.zone_id,
                            "quantity": str(line.quantity),
                        }
                        for line in item.allocations
                    ],
                    "notes": item.notes,
                    "posted_quantity": dump_decimal(item.posted_quantity),
                }
                for item in operation.items
            ],
            "lots": [
                {
                    "id": link.id,
                    "lot_id": link.lot_id,
                    "produced_quantity": str(link.produced_quantity),
                    "notes": link.notes,
                }
                for link in operation.lots
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryOperation:
        items = [
            OperationItem(
                article_id=i["article_id"],
                quantity=Decimal(i["quantity"]),
                lot_id=i.get("lot_id"),
                from_zone_id=i.get("from_zone_id"),
                to_zone_id=i.get("to_zone_id"),
                allocations=[
                    Allocation(a["lot_id"], a["zone_id"], Decimal(a["quantity"]))
                    for a in i.get("allocations", [])
                ],
                notes=i.get("notes"),
                posted_quantity=load_decimal(i.get("posted_quantity")),
            )
            for i in raw["items"]
        ]
        lots = [
            OperationLot(
                id=link["id"],
                operation_id=raw["id"],
                lot_id=link["lot_id"],
                produced_quantity=Decimal(link["produced_quantity"]),
                notes=link.get("notes"),
            )
            for link in raw.get("lots", [])
        ]
        return InventoryOperation(
            id=raw["id"],
            type=OperationType(raw["type"]),
            items=items,
            code=raw["code"],
            status=OperationStatus(raw["status"]),
            scheduled_date=load_datetime(raw.get("scheduled_date")),
            operator=raw.get("operator"),
            notes=raw.get("notes"),
            lots=lots,
            created_at=load_datetime(raw["created_at"]),
            updated_at=load_datetime(raw.get("updated_at")),
            completed_at=load_datetime(raw.get("completed_at")),
        )
