"""CLI commands for inventory operations."""

from __future__ import annotations

import click

from fournil.application.create_operation import CreateOperationHandler
from fournil.application.delete_operation import DeleteOperationHandler
from fournil.application.dto import OperationDTO
from fournil.application.record_delivery import RecordDeliveryHandler
from fournil.application.set_operation_status import SetOperationStatusHandler
from fournil.application.show_operation import ShowOperationHandler
from fournil.application.update_operation import UpdateOperationHandler
from fournil.domain.exceptions import DomainException
from fournil.infrastructure.bootstrap import lifecycle_options, unit_of_work
from fournil.infrastructure.cli.item_parser import parse_items


def _display_operation(dto: OperationDTO) -> None:
    click.echo(f"Operation {dto.code} #{dto.id}  (type={dto.type}, status={dto.status})")
    click.echo(f"Created:   {dto.created_at}")
    if dto.scheduled_date:
        click.echo(f"Scheduled: {dto.scheduled_date}")
    if dto.completed_at:
        click.echo(f"Completed: {dto.completed_at}")
    click.echo()
    click.echo(f"  {'Article':<16} {'Qty':>10} {'Lot':<24} {'From':<8} {'To':<8}")
    click.echo(f"  {'-'*70}")
    for item in dto.items:
        click.echo(
            f"  {item.article_code:<16} {item.quantity:>10} {item.lot_code or '-':<24} "
            f"{item.from_zone or '-':<8} {item.to_zone or '-':<8}"
        )
        for line in item.allocations:
            click.echo(
                f"    <- {line.zone_code:<8} {line.lot_code or '(no lot)':<24} {line.quantity:>10}"
            )
    for link in dto.lots:
        click.echo(f"Lot produced: {link.lot_code} ({link.produced_quantity})")
    for warning in dto.warnings:
        click.echo(f"Warning: {warning}", err=True)


@click.command("create")
@click.option("--type", "operation_type", required=True, help="Operation type, e.g. delivery.")
@click.option("--item", "items", multiple=True, required=True, help="ARTICLE:QTY[,key=value...]")
@click.option("--status", default="draft", show_default=True, help="Initial status.")
@click.option("--scheduled", default=None, help="Scheduled date (ISO 8601).")
@click.option("--operator", default=None, help="Operator name.")
@click.option("--notes", default=None, help="Free text notes.")
def operation_create(
    operation_type: str,
    items: tuple[str, ...],
    status: str,
    scheduled: str | None,
    operator: str | None,
    notes: str | None,
) -> None:
    """Create an inventory operation."""
    specs = parse_items(items)
    handler = CreateOperationHandler(unit_of_work(), **lifecycle_options())

    try:
        dto = handler.handle(
            operation_type,
            specs,
            status=status,
            scheduled_date=scheduled,
            operator=operator,
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_operation(dto)


@click.command("update")
@click.option("--id", "operation_id", required=True, type=int, help="Operation ID.")
@click.option("--item", "items", multiple=True, required=True, help="ARTICLE:QTY[,key=value...]")
def operation_update(operation_id: int, items: tuple[str, ...]) -> None:
    """Replace the items of an operation that is not completed or cancelled."""
    specs = parse_items(items)
    handler = UpdateOperationHandler(unit_of_work(), **lifecycle_options())

    try:
        dto = handler.handle(operation_id, specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_operation(dto)


@click.command("status")
@click.option("--id", "operation_id", required=True, type=int, help="Operation ID.")
@click.option("--to", "status", required=True, help="Target status.")
@click.option("--admin", is_flag=True, default=False, help="Allow privileged transitions.")
@click.option("--conform", default=None, help="Conform quantity produced (production only).")
@click.option("--waste", default=None, help="Waste quantity produced (production only).")
def operation_status(
    operation_id: int,
    status: str,
    admin: bool,
    conform: str | None,
    waste: str | None,
) -> None:
    """Move an operation to another status."""
    handler = SetOperationStatusHandler(unit_of_work(), **lifecycle_options())

    try:
        dto = handler.handle(
            operation_id,
            status,
            privileged=admin,
            conform_quantity=conform,
            waste_quantity=waste,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_operation(dto)


@click.command("delete")
@click.option("--id", "operation_id", required=True, type=int, help="Operation ID.")
@click.option("--admin", is_flag=True, default=False, help="Allow deleting completed operations.")
def operation_delete(operation_id: int, admin: bool) -> None:
    """Delete an operation together with its reservations."""
    handler = DeleteOperationHandler(unit_of_work(), **lifecycle_options())

    try:
        handler.handle(operation_id, privileged=admin)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Operation #{operation_id} deleted.")


@click.command("show")
@click.option("--id", "operation_id", required=True, type=int, help="Operation ID.")
def operation_show(operation_id: int) -> None:
    """Show an operation."""
    handler = ShowOperationHandler(unit_of_work())

    try:
        dto = handler.handle(operation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_operation(dto)


@click.command("deliver")
@click.option("--id", "operation_id", required=True, type=int, help="Delivery operation ID.")
@click.option("--reservation", "reservation_id", required=True, type=int, help="Reservation ID.")
@click.option("--quantity", required=True, help="Quantity handed over.")
def operation_deliver(operation_id: int, reservation_id: int, quantity: str) -> None:
    """Record a partial delivery against one reservation."""
    handler = RecordDeliveryHandler(unit_of_work(), **lifecycle_options())

    try:
        dto = handler.handle(operation_id, reservation_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Reservation #{dto.id}: {dto.delivered_quantity}/{dto.reserved_quantity} delivered "
        f"(status={dto.status})"
    )
