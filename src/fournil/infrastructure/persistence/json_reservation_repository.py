"""JSON-backed implementation of ReservationRepository."""

from __future__ import annotations

from decimal import Decimal

from fournil.domain.model.reservation import (
    Reservation,
    ReservationStatus,
    ReservationType,
)
from fournil.domain.repository.reservation_repository import ReservationRepository
from fournil.infrastructure.persistence.json_table import (
    JsonTable,
    dump_datetime,
    load_datetime,
)

_ACTIVE = ReservationStatus.RESERVED.value


class JsonReservationRepository(JsonTable, ReservationRepository):

    table = "reservations"

    def next_id(self) -> int:
        return self._next()

    def get_by_id(self, reservation_id: int) -> Reservation | None:
        for raw in self._rows:
            if raw["id"] == reservation_id:
                return self._to_domain(raw)
        return None

    def list_for_operation(self, operation_id: int) -> list[Reservation]:
        return [
            self._to_domain(raw)
            for raw in self._rows
            if raw["operation_id"] == operation_id
        ]

    def list_active_for_article(self, article_id: int) -> list[Reservation]:
        return [
            self._to_domain(raw)
            for raw in self._rows
            if raw["article_id"] == article_id and raw["status"] == _ACTIVE
        ]

    def list_article_ids(self) -> list[int]:
        return sorted({raw["article_id"] for raw in self._rows if raw["status"] == _ACTIVE})

    def save(self, reservation: Reservation) -> None:
        if reservation.id is None:
            reservation.id = self.next_id()
        self._upsert(self._to_raw(reservation), lambda raw: raw["id"] == reservation.id)

    def delete(self, reservation_id: int) -> None:
        self._rows[:] = [raw for raw in self._rows if raw["id"] != reservation_id]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(reservation: Reservation) -> dict:
        return {
            "id": reservation.id,
            "operation_id": reservation.operation_id,
            "article_id": reservation.article_id,
            "lot_id": reservation.lot_id,
            "zone_id": reservation.zone_id,
            "reserved_quantity": str(reservation.reserved_quantity),
            "delivered_quantity": str(reservation.delivered_quantity),
            "status": reservation.status.value,
            "reservation_type": reservation.reservation_type.value,
            "created_at": dump_datetime(reservation.created_at),
            "expires_at": dump_datetime(reservation.expires_at),
            "notes": reservation.notes,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Reservation:
        return Reservation(
            id=raw["id"],
            operation_id=raw["operation_id"],
            article_id=raw["article_id"],
            lot_id=raw["lot_id"],
            zone_id=raw["zone_id"],
            reserved_quantity=Decimal(raw["reserved_quantity"]),
            delivered_quantity=Decimal(raw.get("delivered_quantity", "0")),
            status=ReservationStatus(raw["status"]),
            reservation_type=ReservationType(raw["reservation_type"]),
            created_at=load_datetime(raw["created_at"]),
            expires_at=load_datetime(raw.get("expires_at")),
            notes=raw.get("notes"),
        )
