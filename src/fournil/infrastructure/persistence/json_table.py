"""Shared plumbing for repositories backed by one table of the JSON document."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal


def dump_decimal(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def load_decimal(raw: str | None) -> Decimal | None:
    return Decimal(raw) if raw is not None else None


def dump_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def load_datetime(raw: str | None) -> datetime | None:
    return datetime.fromisoformat(raw) if raw is not None else None


class JsonTable:
    """Base for repositories working on one table of the open document."""

    table: str
    sequence: str | None = None

    def __init__(self, document: dict) -> None:
        self._document = document

    @property
    def _rows(self) -> list[dict]:
        return self._document[self.table]

    def _next(self, sequence: str | None = None) -> int:
        name = sequence or self.sequence or self.table
        sequences = self._document["sequences"]
        sequences[name] = sequences.get(name, 0) + 1
        return sequences[name]

    def _upsert(self, raw: dict, match) -> None:
        for i, existing in enumerate(self._rows):
            if match(existing):
                self._rows[i] = raw
                return
        self._rows.append(raw)
