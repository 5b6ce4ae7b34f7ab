import click

from fournil.config import get_settings
from fournil.infrastructure.cli.master_data_commands import (
    article_add,
    lot_annotate,
    zone_add,
)
from fournil.infrastructure.cli.operation_commands import (
    operation_create,
    operation_delete,
    operation_deliver,
    operation_show,
    operation_status,
    operation_update,
)
from fournil.infrastructure.cli.reservation_commands import (
    reservation_list,
    reservation_release,
)
from fournil.infrastructure.cli.stock_commands import (
    availability,
    stock_anomalies,
    stock_show,
)
from fournil.logging_config import setup_logging


@click.group()
def cli() -> None:
    """Fournil: bakery stock reservations and availability"""
    setup_logging(get_settings().log_level)


@cli.group()
def operation() -> None:
    """Manage inventory operations."""


@cli.group()
def reservation() -> None:
    """Inspect and release reservations."""


@cli.group()
def stock() -> None:
    """Inspect on-hand stock."""


@cli.group()
def article() -> None:
    """Manage articles."""


@cli.group()
def zone() -> None:
    """Manage storage zones."""


@cli.group()
def lot() -> None:
    """Manage lots."""


# Register subcommands
cli.add_command(availability)
operation.add_command(operation_create)
operation.add_command(operation_update)
operation.add_command(operation_status)
operation.add_command(operation_delete)
operation.add_command(operation_show)
operation.add_command(operation_deliver)
reservation.add_command(reservation_list)
reservation.add_command(reservation_release)
stock.add_command(stock_show)
stock.add_command(stock_anomalies)
article.add_command(article_add)
zone.add_command(zone_add)
lot.add_command(lot_annotate)
