"""CLI commands for reservations."""

from __future__ import annotations

import click

from fournil.application.release_reservation import ReleaseReservationHandler
from fournil.application.show_reservations import ShowReservationsHandler
from fournil.domain.exceptions import DomainException
from fournil.infrastructure.bootstrap import unit_of_work


@click.command("list")
@click.option("--operation", "operation_id", required=True, type=int, help="Operation ID.")
def reservation_list(operation_id: int) -> None:
    """List the reservations held by an operation."""
    handler = ShowReservationsHandler(unit_of_work())

    try:
        reservations = handler.handle(operation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not reservations:
        click.echo("No reservations found.")
        return

    click.echo(
        f"{'ID':>5} {'Article':<16} {'Lot':<24} {'Zone':<8} {'Reserved':>10} {'Delivered':>10} {'Status':<10}"
    )
    click.echo("-" * 89)
    for r in reservations:
        click.echo(
            f"{r.id:>5} {r.article_code:<16} {r.lot_code or '-':<24} {r.zone_code or '*':<8} "
            f"{r.reserved_quantity:>10} {r.delivered_quantity:>10} {r.status:<10}"
        )


@click.command("release")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
def reservation_release(reservation_id: int) -> None:
    """Release one reservation."""
    handler = ReleaseReservationHandler(unit_of_work())

    try:
        dto = handler.handle(reservation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation #{dto.id} {dto.status}.")
