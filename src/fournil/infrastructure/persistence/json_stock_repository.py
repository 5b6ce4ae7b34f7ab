"""JSON-backed implementation of StockRepository."""

from __future__ import annotations

from decimal import Decimal

from fournil.domain.model.stock import StockEntry
from fournil.domain.repository.stock_repository import ANY, StockRepository
from fournil.infrastructure.persistence.json_table import (
    JsonTable,
    dump_datetime,
    load_datetime,
)


class JsonStockRepository(JsonTable, StockRepository):

    table = "stock_entries"

    def get(self, article_id: int, lot_id: int | None, zone_id: int) -> StockEntry | None:
        for raw in self._rows:
            if _key(raw) == (article_id, lot_id, zone_id):
                return self._to_domain(raw)
        return None

    def query(self, article_id: int, lot_id=ANY, zone_id=ANY) -> list[StockEntry]:
        return [
            self._to_domain(raw)
            for raw in self._rows
            if raw["article_id"] == article_id
            and (lot_id is ANY or raw["lot_id"] == lot_id)
            and (zone_id is ANY or raw["zone_id"] == zone_id)
        ]

    def list_article_ids(self) -> list[int]:
        return sorted({raw["article_id"] for raw in self._rows})

    def save(self, entry: StockEntry) -> None:
        self._upsert(self._to_raw(entry), lambda raw: _key(raw) == entry.key)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(entry: StockEntry) -> dict:
        return {
            "article_id": entry.article_id,
            "lot_id": entry.lot_id,
            "zone_id": entry.zone_id,
            "quantity": str(entry.quantity),
            "updated_at": dump_datetime(entry.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockEntry:
        return StockEntry(
            article_id=raw["article_id"],
            lot_id=raw["lot_id"],
            zone_id=raw["zone_id"],
            quantity=Decimal(raw["quantity"]),
            updated_at=load_datetime(raw["updated_at"]),
        )


def _key(raw: dict) -> tuple:
    return (raw["article_id"], raw["lot_id"], raw["zone_id"])
