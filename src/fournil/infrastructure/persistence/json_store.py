"""JSON-file-backed Unit of Work.

All tables live in one JSON document so a unit of work can be written in
a single atomic file replacement. While a unit of work is open it holds an
OS-level lock on ``<store>.lock``, which serialises the
read-availability-then-write sequence of concurrent requests, whether they
come from threads of one process or from separate CLI invocations.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

from filelock import FileLock, Timeout

from fournil.domain.exceptions import DomainException
from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.infrastructure.persistence.json_article_repository import (
    JsonArticleRepository,
    JsonStorageZoneRepository,
)
from fournil.infrastructure.persistence.json_lot_repository import JsonLotRepository
from fournil.infrastructure.persistence.json_operation_repository import (
    JsonOperationRepository,
)
from fournil.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)
from fournil.infrastructure.persistence.json_stock_repository import JsonStockRepository

TABLES = (
    "articles",
    "storage_zones",
    "stock_entries",
    "reservations",
    "lots",
    "operations",
)

DEFAULT_LOCK_TIMEOUT = 10.0

# One FileLock per store file. Each thread holds its own descriptor on the
# lock file, so threads exclude each other the same way processes do, and
# re-entering from the thread that already holds the lock only bumps a counter.
_locks: dict[Path, FileLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> FileLock:
    with _locks_guard:
        lock = _locks.get(path)
        if lock is None:
            lock = _locks[path] = FileLock(f"{path}.lock", thread_local=True)
        return lock


class StoreBusyError(DomainException):
    """Another request kept the store locked for longer than the timeout."""


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, file_path: Path, lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> None:
        self._file_path = Path(file_path).resolve()
        self._lock_timeout = lock_timeout
        self._document: dict | None = None
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = _lock_for(self._file_path)
        self._ensure_file()

    # --- UnitOfWork interface -------------------------------------------------

    def _begin(self) -> None:
        self._acquire()
        try:
            self._bind(self._load_raw())
        except BaseException:
            self._lock.release()
            raise

    def _end(self) -> None:
        self._document = None
        self._lock.release()

    def commit(self) -> None:
        if self._document is None:
            raise RuntimeError("Unit of work is not open")
        self._persist_raw(self._document)

    def rollback(self) -> None:
        if self._document is not None:
            self._bind(self._load_raw())

    # --- Internal helpers -----------------------------------------------------

    def _bind(self, document: dict) -> None:
        self._document = document
        self.articles = JsonArticleRepository(document)
        self.zones = JsonStorageZoneRepository(document)
        self.stock = JsonStockRepository(document)
        self.reservations = JsonReservationRepository(document)
        self.lots = JsonLotRepository(document)
        self.operations = JsonOperationRepository(document)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict:
        document = json.loads(self._file_path.read_text(encoding="utf-8"))
        for table in TABLES:
            document.setdefault(table, [])
        document.setdefault("sequences", {})
        return document

    def _persist_raw(self, document: dict) -> None:
        payload = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _acquire(self) -> None:
        try:
            self._lock.acquire(timeout=self._lock_timeout)
        except Timeout as exc:
            raise StoreBusyError(
                f"Store {self._file_path.name} is locked by another request; try again"
            ) from exc

    def _ensure_file(self) -> None:
        if self._file_path.exists():
            return
        self._acquire()
        try:
            if not self._file_path.exists():
                empty: dict = {table: [] for table in TABLES}
                empty["sequences"] = {}
                self._persist_raw(empty)
        finally:
            self._lock.release()
