"""CLI commands for reading orders."""

from __future__ import annotations

import json

import click

from bottletrack.application.dto import order_record
from bottletrack.application.list_orders import ListOrdersHandler
from bottletrack.application.show_order import ShowOrderHandler
from bottletrack.domain.exceptions import DomainException
from bottletrack.domain.model.order import Order, ProductionStatus
from bottletrack.infrastructure.bootstrap import dataset_repository


@click.command("list")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print order records in the shape the dataset is saved in.")
def orders_list(as_json: bool) -> None:
    """List all orders.

    With --json the records are rendered the way a save would write them:
    bottle status is derived and missing counters read as zero.
    """
    handler = ListOrdersHandler(dataset_repo=dataset_repository())
    orders = handler.handle()

    if as_json:
        click.echo(json.dumps([order_record(o) for o in orders], indent=2, ensure_ascii=False))
        return

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<16} {'Status':<12} {'Items':>6} {'Bottles':>8} {'Done':>6}")
    click.echo("-" * 52)
    for order in orders:
        bottles = list(order.bottles())
        done = sum(1 for b in bottles if b.status is ProductionStatus.COMPLETED)
        click.echo(
            f"{order.order_number:<16} {order.order_status.value:<12} "
            f"{len(order.items):>6} {len(bottles):>8} {done:>6}"
        )


def _display_order(order: Order) -> None:
    """Shared formatting for displaying an order's bottles."""
    click.echo(f"Order {order.order_number}  (status={order.order_status.value})")
    for item in order.items:
        click.echo()
        click.echo(f"  Item {item.id}")
        click.echo(
            f"  {'Deco':<10} {'Bottle':<20} {'Qty':>6} {'Done':>6} "
            f"{'Used':>6} {'Stock':>7} {'Status':<12}"
        )
        click.echo(f"  {'-'*73}")
        for b in item.bottles:
            click.echo(
                f"  {b.deco_no:<10} {b.bottle_name:<20} {b.quantity:>6} "
                f"{b.completed_qty:>6} {b.inventory_used:>6} "
                f"{b.available_stock:>7} {b.status.value:<12}"
            )


@click.command("show")
@click.option("--order", "order_number", required=True, help="Order number to display.")
def orders_show(order_number: str) -> None:
    """Show per-bottle progress of an order."""
    handler = ShowOrderHandler(dataset_repo=dataset_repository())

    try:
        order = handler.handle(order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(order)
