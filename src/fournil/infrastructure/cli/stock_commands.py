"""CLI commands for stock and availability queries."""

from __future__ import annotations

import click

from fournil.application.show_anomalies import ShowAnomaliesHandler
from fournil.application.show_availability import ShowAvailabilityHandler
from fournil.application.show_stock import ShowStockHandler
from fournil.domain.exceptions import DomainException
from fournil.infrastructure.bootstrap import unit_of_work


@click.command("availability")
@click.option("--article", required=True, help="Article code.")
@click.option("--exclude", "exclude_operation_id", type=int, default=None,
              help="Ignore the reservations of this operation.")
def availability(article: str, exclude_operation_id: int | None) -> None:
    """Show stock, reservations and availability per (lot, zone)."""
    handler = ShowAvailabilityHandler(unit_of_work())

    try:
        dto = handler.handle(article, exclude_operation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{'Lot':<24} {'Zone':<8} {'Stock':>10} {'Reserved':>10} {'Available':>10}")
    click.echo("-" * 66)
    for row in dto.per_combination:
        click.echo(
            f"{row.lot_code or '(no lot)':<24} {row.zone_code or '*':<8} "
            f"{row.stock:>10} {row.reserved:>10} {row.available:>10}"
        )
    click.echo("-" * 66)
    click.echo(
        f"{'Total':<33} {dto.total_stock:>10} {dto.total_reserved:>10} {dto.total_available:>10}"
    )
    for anomaly in dto.anomalies:
        click.echo(f"Anomaly: {anomaly}", err=True)


@click.command("show")
@click.option("--article", default=None, help="Restrict to one article code.")
def stock_show(article: str | None) -> None:
    """Show on-hand quantities."""
    handler = ShowStockHandler(unit_of_work())

    try:
        lines = handler.handle(article)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No stock records found.")
        return

    click.echo(f"{'Article':<16} {'Lot':<24} {'Zone':<8} {'Quantity':>10}")
    click.echo("-" * 61)
    for line in lines:
        click.echo(
            f"{line.article_code:<16} {line.lot_code or '-':<24} {line.zone_code:<8} {line.quantity:>10}"
        )


@click.command("anomalies")
def stock_anomalies() -> None:
    """List reservations pointing at combinations without stock."""
    handler = ShowAnomaliesHandler(unit_of_work())

    try:
        anomalies = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not anomalies:
        click.echo("No anomalies found.")
        return

    for anomaly in anomalies:
        click.echo(anomaly)
