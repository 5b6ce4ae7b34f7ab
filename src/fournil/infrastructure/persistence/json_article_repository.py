"""JSON-backed implementations of the master-data repositories."""

from __future__ import annotations

from fournil.domain.model.article import Article, StorageZone
from fournil.domain.repository.article_repository import (
    ArticleRepository,
    StorageZoneRepository,
)
from fournil.infrastructure.persistence.json_table import (
    JsonTable,
    dump_decimal,
    load_decimal,
)


class JsonArticleRepository(JsonTable, ArticleRepository):

    table = "articles"

    def next_id(self) -> int:
        return self._next()

    def get_by_id(self, article_id: int) -> Article | None:
        for raw in self._rows:
            if raw["id"] == article_id:
                return self._to_domain(raw)
        return None

    def get_by_code(self, code: str) -> Article | None:
        for raw in self._rows:
            if raw["code"] == code:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Article]:
        return [self._to_domain(raw) for raw in self._rows]

    def save(self, article: Article) -> None:
        self._upsert(self._to_raw(article), lambda raw: raw["id"] == article.id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(article: Article) -> dict:
        return {
            "id": article.id,
            "code": article.code,
            "name": article.name,
            "unit": article.unit,
            "perishable": article.perishable,
            "shelf_life_days": article.shelf_life_days,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Article:
        return Article(
            id=raw["id"],
            code=raw["code"],
            name=raw["name"],
            unit=raw.get("unit", "kg"),
            perishable=raw.get("perishable", False),
            shelf_life_days=raw.get("shelf_life_days"),
        )


class JsonStorageZoneRepository(JsonTable, StorageZoneRepository):

    table = "storage_zones"

    def next_id(self) -> int:
        return self._next()

    def get_by_id(self, zone_id: int) -> StorageZone | None:
        for raw in self._rows:
            if raw["id"] == zone_id:
                return self._to_domain(raw)
        return None

    def get_by_code(self, code: str) -> StorageZone | None:
        for raw in self._rows:
            if raw["code"] == code:
                return self._to_domain(raw)
        return None

    def save(self, zone: StorageZone) -> None:
        self._upsert(self._to_raw(zone), lambda raw: raw["id"] == zone.id)

    @staticmethod
    def _to_raw(zone: StorageZone) -> dict:
        return {
            "id": zone.id,
            "code": zone.code,
            "name": zone.name,
            "capacity": dump_decimal(zone.capacity),
            "unit": zone.unit,
        }

    @staticmethod
    def _to_domain(raw: dict) -> StorageZone:
        return StorageZone(
            id=raw["id"],
            code=raw["code"],
            name=raw["name"],
            capacity=load_decimal(raw.get("capacity")),
            unit=raw.get("unit"),
        )
