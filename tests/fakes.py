"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.

Like the JSON repositories they hand out copies: a domain object changed
without being saved again does not change the store.
"""

from __future__ import annotations

import copy
from datetime import date

from fournil.domain.model.article import Article, StorageZone
from fournil.domain.model.lot import Lot
from fournil.domain.model.operation import InventoryOperation
from fournil.domain.model.reservation import Reservation, ReservationStatus
from fournil.domain.model.stock import StockEntry
from fournil.domain.repository.article_repository import (
    ArticleRepository,
    StorageZoneRepository,
)
from fournil.domain.repository.lot_repository import LotRepository
from fournil.domain.repository.operation_repository import OperationRepository
from fournil.domain.repository.reservation_repository import ReservationRepository
from fournil.domain.repository.stock_repository import ANY, StockRepository
from fournil.domain.repository.unit_of_work import UnitOfWork


class FakeArticleRepository(ArticleRepository):

    def __init__(self, articles: list[Article] | None = None) -> None:
        self._store: dict[int, Article] = {}
        for a in articles or []:
            self._store[a.id] = copy.deepcopy(a)
        self._last_id = max(self._store, default=0)

    def next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def get_by_id(self, article_id: int) -> Article | None:
        return copy.deepcopy(self._store.get(article_id))

    def get_by_code(self, code: str) -> Article | None:
        for a in self._store.values():
            if a.code == code:
                return copy.deepcopy(a)
        return None

    def list_all(self) -> list[Article]:
        return [copy.deepcopy(a) for a in self._store.values()]

    def save(self, article: Article) -> None:
        self._store[article.id] = copy.deepcopy(article)


class FakeStorageZoneRepository(StorageZoneRepository):

    def __init__(self, zones: list[StorageZone] | None = None) -> None:
        self._store: dict[int, StorageZone] = {}
        for z in zones or []:
            self._store[z.id] = copy.deepcopy(z)
        self._last_id = max(self._store, default=0)

    def next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def get_by_id(self, zone_id: int) -> StorageZone | None:
        return copy.deepcopy(self._store.get(zone_id))

    def get_by_code(self, code: str) -> StorageZone | None:
        for z in self._store.values():
            if z.code == code:
                return copy.deepcopy(z)
        return None

    def save(self, zone: StorageZone) -> None:
        self._store[zone.id] = copy.deepcopy(zone)


class FakeStockRepository(StockRepository):

    def __init__(self, entries: list[StockEntry] | None = None) -> None:
        self._store: dict[tuple, StockEntry] = {}
        for e in entries or []:
            self._store[e.key] = copy.deepcopy(e)

    def get(self, article_id: int, lot_id: int | None, zone_id: int) -> StockEntry | None:
        return copy.deepcopy(self._store.get((article_id, lot_id, zone_id)))

    def query(self, article_id: int, lot_id=ANY, zone_id=ANY) -> list[StockEntry]:
        return [
            copy.deepcopy(e)
            for e in self._store.values()
            if e.article_id == article_id
            and (lot_id is ANY or e.lot_id == lot_id)
            and (zone_id is ANY or e.zone_id == zone_id)
        ]

    def list_article_ids(self) -> list[int]:
        return sorted({e.article_id for e in self._store.values()})

    def save(self, entry: StockEntry) -> None:
        self._store[entry.key] = copy.deepcopy(entry)


class FakeReservationRepository(ReservationRepository):

    def __init__(self) -> None:
        self._store: dict[int, Reservation] = {}
        self._last_id = 0

    def next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def get_by_id(self, reservation_id: int) -> Reservation | None:
        return copy.deepcopy(self._store.get(reservation_id))

    def list_for_operation(self, operation_id: int) -> list[Reservation]:
        return [
            copy.deepcopy(r) for r in self._store.values() if r.operation_id == operation_id
        ]

    def list_active_for_article(self, article_id: int) -> list[Reservation]:
        return [
            copy.deepcopy(r)
            for r in self._store.values()
            if r.article_id == article_id and r.status == ReservationStatus.RESERVED
        ]

    def list_article_ids(self) -> list[int]:
        return sorted(
            {r.article_id for r in self._store.values() if r.status == ReservationStatus.RESERVED}
        )

    def save(self, reservation: Reservation) -> None:
        if reservation.id is None:
            reservation.id = self.next_id()
        self._store[reservation.id] = copy.deepcopy(reservation)

    def delete(self, reservation_id: int) -> None:
        self._store.pop(reservation_id, None)


class FakeLotRepository(LotRepository):

    def __init__(self, lots: list[Lot] | None = None) -> None:
        self._store: dict[int, Lot] = {}
        for lot in lots or []:
            self._store[lot.id] = copy.deepcopy(lot)
        self._last_id = max(self._store, default=0)
        self._last_link_id = 0

    def next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def next_link_id(self) -> int:
        self._last_link_id += 1
        return self._last_link_id

    def get_by_id(self, lot_id: int) -> Lot | None:
        return copy.deepcopy(self._store.get(lot_id))

    def get_by_code(self, code: str) -> Lot | None:
        for lot in self._store.values():
            if lot.code == code:
                return copy.deepcopy(lot)
        return None

    def list_for_article(self, article_id: int) -> list[Lot]:
        return [copy.deepcopy(lot) for lot in self._store.values() if lot.article_id == article_id]

    def count_for_article_on(self, article_id: int, day: date) -> int:
        return sum(
            1
            for lot in self._store.values()
            if lot.article_id == article_id
            and lot.manufacturing_date is not None
            and lot.manufacturing_date.date() == day
        )

    def save(self, lot: Lot) -> None:
        if lot.id is None:
            lot.id = self.next_id()
        self._store[lot.id] = copy.deepcopy(lot)


class FakeOperationRepository(OperationRepository):

    def __init__(self) -> None:
        self._store: dict[int, InventoryOperation] = {}
        self._last_id = 0

    def next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def get_by_id(self, operation_id: int) -> InventoryOperation | None:
        return copy.deepcopy(self._store.get(operation_id))

    def list_all(self) -> list[InventoryOperation]:
        return [copy.deepcopy(o) for o in self._store.values()]

    def save(self, operation: InventoryOperation) -> None:
        if operation.id is None:
            operation.assign_identity(self.next_id())
        self._store[operation.id] = copy.deepcopy(operation)

    def delete(self, operation_id: int) -> None:
        self._store.pop(operation_id, None)


class FakeUnitOfWork(UnitOfWork):
    """Unit of work over the fakes; rollback restores the last committed state."""

    def __init__(
        self,
        articles: list[Article] | None = None,
        zones: list[StorageZone] | None = None,
        lots: list[Lot] | None = None,
        stock: list[StockEntry] | None = None,
    ) -> None:
        self.articles = FakeArticleRepository(articles)
        self.zones = FakeStorageZoneRepository(zones)
        self.stock = FakeStockRepository(stock)
        self.reservations = FakeReservationRepository()
        self.lots = FakeLotRepository(lots)
        self.operations = FakeOperationRepository()
        self.commits = 0
        self._snapshot: dict | None = None

    def _repositories(self) -> dict:
        return {
            "articles": self.articles,
            "zones": self.zones,
            "stock": self.stock,
            "reservations": self.reservations,
            "lots": self.lots,
            "operations": self.operations,
        }

    def _capture(self) -> dict:
        return {name: copy.deepcopy(repo.__dict__) for name, repo in self._repositories().items()}

    def _begin(self) -> None:
        self._snapshot = self._capture()

    def _end(self) -> None:
        self._snapshot = None

    def commit(self) -> None:
        self._snapshot = self._capture()
        self.commits += 1

    def rollback(self) -> None:
        if self._snapshot is None:
            return
        for name, repo in self._repositories().items():
            repo.__dict__ = copy.deepcopy(self._snapshot[name])
