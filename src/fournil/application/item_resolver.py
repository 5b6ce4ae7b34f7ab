"""Turn user input (codes, strings) into domain values.

Unknown codes raise EntityNotFoundError, malformed values raise
ValidationError, so every handler reports bad input the same way.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from fournil.application.dto import ItemSpec
from fournil.domain.exceptions import EntityNotFoundError, ValidationError
from fournil.domain.model.article import Article, StorageZone
from fournil.domain.model.operation import OperationItem, OperationStatus, OperationType
from fournil.domain.model.value_objects import Allocation, to_decimal
from fournil.domain.repository.unit_of_work import UnitOfWork


def parse_quantity(value: str | float | int | Decimal | None) -> Decimal | None:
    if value is None:
        return None
    try:
        return to_decimal(value)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


def parse_type(value: str) -> OperationType:
    try:
        return OperationType(value)
    except ValueError as exc:
        allowed = ", ".join(t.value for t in OperationType)
        raise ValidationError(
            f"Unknown operation type '{value}' (expected one of: {allowed})"
        ) from exc


def parse_status(value: str) -> OperationStatus:
    try:
        return OperationStatus(value)
    except ValueError as exc:
        allowed = ", ".join(s.value for s in OperationStatus)
        raise ValidationError(
            f"Unknown status '{value}' (expected one of: {allowed})"
        ) from exc


def parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid date '{value}'") from exc


def article_by_code(uow: UnitOfWork, code: str) -> Article:
    article = uow.articles.get_by_code(code)
    if article is None:
        raise EntityNotFoundError(f"Article not found: '{code}'")
    return article


def zone_by_code(uow: UnitOfWork, code: str) -> StorageZone:
    zone = uow.zones.get_by_code(code)
    if zone is None:
        raise EntityNotFoundError(f"Storage zone not found: '{code}'")
    return zone


def lot_id_by_code(uow: UnitOfWork, code: str | None) -> int | None:
    if code is None:
        return None
    lot = uow.lots.get_by_code(code)
    if lot is None:
        raise EntityNotFoundError(f"Lot not found: '{code}'")
    return lot.id


def resolve_items(uow: UnitOfWork, specs: list[ItemSpec]) -> list[OperationItem]:
    items: list[OperationItem] = []
    for spec in specs:
        article = article_by_code(uow, spec.article_code)
        items.append(
            OperationItem(
                article_id=article.id,
                quantity=parse_quantity(spec.quantity),
                lot_id=lot_id_by_code(uow, spec.lot_code),
                from_zone_id=zone_by_code(uow, spec.from_zone).id if spec.from_zone else None,
                to_zone_id=zone_by_code(uow, spec.to_zone).id if spec.to_zone else None,
                allocations=[
                    Allocation(
                        lot_id=lot_id_by_code(uow, line.lot_code),
                        zone_id=zone_by_code(uow, line.zone_code).id,
                        quantity=parse_quantity(line.quantity),
                    )
                    for line in spec.allocations
                ],
                notes=spec.notes,
            )
        )
    return items
