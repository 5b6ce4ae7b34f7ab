"""CLI commands for articles, storage zones and lots."""

from __future__ import annotations

import click

from fournil.application.add_article import AddArticleHandler
from fournil.application.add_storage_zone import AddStorageZoneHandler
from fournil.application.annotate_lot import AnnotateLotHandler
from fournil.domain.exceptions import DomainException
from fournil.infrastructure.bootstrap import unit_of_work


@click.command("add")
@click.option("--code", required=True, help="Article code.")
@click.option("--name", required=True, help="Article name.")
@click.option("--unit", default="kg", show_default=True, help="Unit of measure.")
@click.option("--perishable", is_flag=True, default=False, help="Mark as perishable.")
@click.option("--shelf-life", "shelf_life_days", type=int, default=None, help="Shelf life in days.")
def article_add(
    code: str,
    name: str,
    unit: str,
    perishable: bool,
    shelf_life_days: int | None,
) -> None:
    """Add an article."""
    handler = AddArticleHandler(unit_of_work())

    try:
        article = handler.handle(
            code, name, unit=unit, perishable=perishable, shelf_life_days=shelf_life_days
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Article '{article.code}' added (id={article.id})")


@click.command("add")
@click.option("--code", required=True, help="Zone code.")
@click.option("--name", required=True, help="Zone name.")
@click.option("--capacity", default=None, help="Capacity.")
@click.option("--unit", default=None, help="Capacity unit.")
def zone_add(code: str, name: str, capacity: str | None, unit: str | None) -> None:
    """Add a storage zone."""
    handler = AddStorageZoneHandler(unit_of_work())

    try:
        zone = handler.handle(code, name, capacity=capacity, unit=unit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Storage zone '{zone.code}' added (id={zone.id})")


@click.command("annotate")
@click.option("--code", required=True, help="Lot code.")
@click.option("--notes", required=True, help="New notes (empty text clears them).")
def lot_annotate(code: str, notes: str) -> None:
    """Replace the notes of a lot."""
    handler = AnnotateLotHandler(unit_of_work())

    try:
        lot = handler.handle(code, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Lot '{lot.code}' notes: {lot.notes or '(none)'}")
