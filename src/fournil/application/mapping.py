"""Domain → DTO mapping shared by the handlers.

IDs are translated back to the codes users know; a reference that no
longer resolves is shown as ``#<id>``.
"""

from __future__ import annotations

from datetime import datetime

from fournil.application.dto import (
    AllocationDTO,
    AvailabilityDTO,
    CombinationDTO,
    OperationDTO,
    OperationItemDTO,
    OperationLotDTO,
    ReservationDTO,
)
from fournil.domain.exceptions import DomainWarning
from fournil.domain.model.operation import InventoryOperation
from fournil.domain.model.reservation import Reservation
from fournil.domain.repository.unit_of_work import UnitOfWork
from fournil.domain.service.availability_calculator import AvailabilityReport

_DATE_FORMAT = "%Y-%m-%d %H:%M UTC"


def _when(value: datetime | None) -> str | None:
    return value.strftime(_DATE_FORMAT) if value is not None else None


def article_code(uow: UnitOfWork, article_id: int) -> str:
    article = uow.articles.get_by_id(article_id)
    return article.code if article is not None else f"#{article_id}"


def zone_code(uow: UnitOfWork, zone_id: int | None) -> str | None:
    if zone_id is None:
        return None
    zone = uow.zones.get_by_id(zone_id)
    return zone.code if zone is not None else f"#{zone_id}"


def lot_code(uow: UnitOfWork, lot_id: int | None) -> str | None:
    if lot_id is None:
        return None
    lot = uow.lots.get_by_id(lot_id)
    return lot.code if lot is not None else f"#{lot_id}"


def to_operation_dto(
    uow: UnitOfWork,
    operation: InventoryOperation,
    warnings: list[DomainWarning] | None = None,
) -> OperationDTO:
    return OperationDTO(
        id=operation.id,  # type: ignore[arg-type]
        code=operation.code or "",
        type=operation.type.value,
        status=operation.status.value,
        items=[
            OperationItemDTO(
                article_code=article_code(uow, item.article_id),
                quantity=item.quantity,
                lot_code=lot_code(uow, item.lot_id),
                from_zone=zone_code(uow, item.from_zone_id),
                to_zone=zone_code(uow, item.to_zone_id),
                allocations=[
                    AllocationDTO(
                        lot_code=lot_code(uow, line.lot_id),
                        zone_code=zone_code(uow, line.zone_id) or "",
                        quantity=line.quantity,
                    )
                    for line in item.allocations
                ],
            )
            for item in operation.items
        ],
        lots=[
            OperationLotDTO(
                lot_code=lot_code(uow, link.lot_id) or "",
                produced_quantity=link.produced_quantity,
            )
            for link in operation.lots
        ],
        scheduled_date=_when(operation.scheduled_date),
        created_at=_when(operation.created_at) or "",
        completed_at=_when(operation.completed_at),
        warnings=[str(w) for w in warnings or []],
    )


def to_reservation_dto(uow: UnitOfWork, reservation: Reservation) -> ReservationDTO:
    return ReservationDTO(
        id=reservation.id,  # type: ignore[arg-type]
        operation_id=reservation.operation_id,
        article_code=article_code(uow, reservation.article_id),
        lot_code=lot_code(uow, reservation.lot_id),
        zone_code=zone_code(uow, reservation.zone_id),
        reserved_quantity=reservation.reserved_quantity,
        delivered_quantity=reservation.delivered_quantity,
        status=reservation.status.value,
        reservation_type=reservation.reservation_type.value,
        created_at=_when(reservation.created_at) or "",
    )


def to_availability_dto(uow: UnitOfWork, report: AvailabilityReport) -> AvailabilityDTO:
    return AvailabilityDTO(
        article_code=article_code(uow, report.article_id),
        exclude_operation_id=report.exclude_operation_id,
        per_combination=[
            CombinationDTO(
                lot_code=lot_code(uow, row.lot_id),
                zone_code=zone_code(uow, row.zone_id),
                stock=row.stock,
                reserved=row.reserved,
                available=row.available,
            )
            for row in report.per_combination
        ],
        total_stock=report.summary.total_stock,
        total_reserved=report.summary.total_reserved,
        total_available=report.summary.total_available,
        anomalies=[str(a) for a in report.anomalies],
    )
