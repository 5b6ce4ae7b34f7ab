"""JSON-backed implementation of LotRepository."""

from __future__ import annotations

from datetime import date

from fournil.domain.model.lot import Lot
from fournil.domain.repository.lot_repository import LotRepository
from fournil.infrastructure.persistence.json_table import (
    JsonTable,
    dump_datetime,
    load_datetime,
)


class JsonLotRepository(JsonTable, LotRepository):

    table = "lots"

    def next_id(self) -> int:
        return self._next()

    def next_link_id(self) -> int:
        return self._next("operation_lots")

    def get_by_id(self, lot_id: int) -> Lot | None:
        for raw in self._rows:
            if raw["id"] == lot_id:
                return self._to_domain(raw)
        return None

    def get_by_code(self, code: str) -> Lot | None:
        for raw in self._rows:
            if raw["code"] == code:
                return self._to_domain(raw)
        return None

    def list_for_article(self, article_id: int) -> list[Lot]:
        return [self._to_domain(raw) for raw in self._rows if raw["article_id"] == article_id]

    def count_for_article_on(self, article_id: int, day: date) -> int:
        return sum(
            1
            for lot in self.list_for_article(article_id)
            if lot.manufacturing_date is not None and lot.manufacturing_date.date() == day
        )

    def save(self, lot: Lot) -> None:
        if lot.id is None:
            lot.id = self.next_id()
        self._upsert(self._to_raw(lot), lambda raw: raw["id"] == lot.id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(lot: Lot) -> dict:
        return {
            "id": lot.id,
            "article_id": lot.article_id,
            "code": lot.code,
            "manufacturing_date": dump_datetime(lot.manufacturing_date),
            "use_date": dump_datetime(lot.use_date),
            "expiration_date": dump_datetime(lot.expiration_date),
            "alert_date": dump_datetime(lot.alert_date),
            "supplier_id": lot.supplier_id,
            "notes": lot.notes,
            "created_at": dump_datetime(lot.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Lot:
        return Lot(
            id=raw["id"],
            article_id=raw["article_id"],
            code=raw["code"],
            manufacturing_date=load_datetime(raw.get("manufacturing_date")),
            use_date=load_datetime(raw.get("use_date")),
            expiration_date=load_datetime(raw.get("expiration_date")),
            alert_date=load_datetime(raw.get("alert_date")),
            supplier_id=raw.get("supplier_id"),
            notes=raw.get("notes"),
            created_at=load_datetime(raw["created_at"]),
        )
