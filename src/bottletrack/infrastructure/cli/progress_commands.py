"""CLI commands for recording production progress."""

from __future__ import annotations

import json

import click

from bottletrack.application.envelope import (
    apply_progress_payload,
    failure_envelope,
)
from bottletrack.domain.exceptions import DomainException, ValidationError
from bottletrack.domain.model.value_objects import ProgressUpdate
from bottletrack.infrastructure.bootstrap import apply_progress_handler


def _parse_bottles(raw: tuple[str, ...], note: str) -> list[ProgressUpdate]:
    """Parse 'D-1:10:5:55' (deco:produced:stock:total) into updates."""
    updates: list[ProgressUpdate] = []
    for spec in raw:
        parts = spec.strip().rsplit(":", 3)
        if len(parts) != 4:
            raise click.BadParameter(
                f"Invalid bottle format '{spec}'. "
                f"Expected 'DECO:PRODUCED:STOCK_USED:TOTAL_COMPLETED'."
            )
        deco_no, produced, stock_used, total = parts
        updates.append(
            ProgressUpdate.of(
                deco_no=deco_no.strip(),
                quantity_produced=produced,
                stock_used=stock_used,
                total_completed=total,
                notes=note,
            )
        )
    return updates


@click.command("update")
@click.option("--order", "order_number", required=True, help="Order number.")
@click.option("--item", "item_id", required=True, help="Item id within the order.")
@click.option(
    "--bottle",
    "bottles",
    required=True,
    multiple=True,
    help="Bottle update as 'DECO:PRODUCED:STOCK_USED:TOTAL_COMPLETED'. Repeatable.",
)
@click.option("--note", default="", help="Note stored on each tracking entry.")
def progress_update(
    order_number: str, item_id: str, bottles: tuple[str, ...], note: str
) -> None:
    """Apply a progress batch to one item of an order."""
    handler = apply_progress_handler()

    try:
        updates = _parse_bottles(bottles, note)
        result = handler.handle(order_number, item_id, updates)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Order {result.order.order_number} updated  "
        f"(status={result.order.order_status.value})"
    )
    click.echo()
    click.echo(
        f"  {'Deco':<10} {'Bottle':<20} {'Before':>7} {'After':>6} "
        f"{'Made':>5} {'Used':>5} {'Left':>5} {'Status':<12}"
    )
    click.echo(f"  {'-'*77}")
    for s in result.updates:
        click.echo(
            f"  {s.deco_no:<10} {s.bottle_name:<20} {s.previous_completed:>7} "
            f"{s.new_completed:>6} {s.quantity_produced:>5} {s.stock_used:>5} "
            f"{s.remaining:>5} {s.status.value:<12}"
        )


@click.command("apply")
@click.argument("request_file", type=click.File("r", encoding="utf-8"))
@click.pass_context
def progress_apply(ctx: click.Context, request_file) -> None:
    """Apply a progress batch from a JSON request body ('-' for stdin).

    Prints the response envelope as JSON and exits 1 on failure.
    """
    try:
        payload = json.load(request_file)
    except ValueError:
        envelope = failure_envelope(ValidationError("Request body is not valid JSON"))
    else:
        envelope = apply_progress_payload(apply_progress_handler(), payload)

    click.echo(json.dumps(envelope.body, indent=2, ensure_ascii=False))
    if not envelope.success:
        ctx.exit(1)
