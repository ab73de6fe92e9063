import click

from bottletrack.infrastructure.cli.order_commands import orders_list, orders_show
from bottletrack.infrastructure.cli.progress_commands import (
    progress_apply,
    progress_update,
)
from bottletrack.infrastructure.logging_setup import setup_logging


@click.group()
def cli() -> None:
    """bottletrack: bottle production progress tracker"""
    setup_logging()


@cli.group()
def orders() -> None:
    """Inspect orders."""


@cli.group()
def progress() -> None:
    """Record production progress."""


# Register subcommands
orders.add_command(orders_list)
orders.add_command(orders_show)
progress.add_command(progress_apply)
progress.add_command(progress_update)
