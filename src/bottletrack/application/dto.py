"""Data Transfer Objects: plain containers that cross layer boundaries.

Inbound, ``ProgressRequest`` parses the loosely typed request body of a
progress batch.  Outbound, the ``*_record`` functions render domain
objects in the wire/persisted shape (the same field names the dataset
file uses), keeping any fields this system does not model.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone

from bottletrack.domain.exceptions import ValidationError
from bottletrack.domain.model.order import Bottle, Item, Order, TrackingEntry
from bottletrack.domain.model.value_objects import ProgressUpdate, is_identifier
from bottletrack.domain.service.progress_reconciler import UpdateSummary

MISSING_FIELDS_MESSAGE = (
    "Missing required fields: orderNumber, itemId, and updates array"
)


@dataclass(frozen=True)
class ProgressRequest:
    """Input: one progress batch for a single item of an order."""

    order_number: str
    item_id: str
    updates: list[ProgressUpdate]

    @staticmethod
    def from_payload(payload: object) -> ProgressRequest:
        if not isinstance(payload, Mapping):
            raise ValidationError(MISSING_FIELDS_MESSAGE)

        order_number = payload.get("orderNumber")
        item_id = payload.get("itemId")
        raw_updates = payload.get("updates")
        if (
            not is_identifier(order_number)
            or not is_identifier(item_id)
            or not isinstance(raw_updates, list)
        ):
            raise ValidationError(MISSING_FIELDS_MESSAGE)

        updates: list[ProgressUpdate] = []
        for raw in raw_updates:
            if not isinstance(raw, Mapping):
                raise ValidationError("Each update must be an object")
            updates.append(
                ProgressUpdate.of(
                    deco_no=raw.get("deco_no"),
                    quantity_produced=raw.get("quantity_produced"),
                    stock_used=raw.get("stock_used"),
                    total_completed=raw.get("total_completed"),
                    notes=raw.get("notes"),
                )
            )
        return ProgressRequest(
            order_number=order_number, item_id=item_id, updates=updates
        )


@dataclass(frozen=True)
class ProgressResult:
    """Output: the updated order plus what each update did."""

    order: Order
    updates: list[UpdateSummary]
    timestamp: datetime


# --- Record mapping -----------------------------------------------------------


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. ``...T08:30:00.000Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def tracking_entry_record(entry: TrackingEntry) -> dict:
    record = {}
    if entry.date is not None:
        record["date"] = format_timestamp(entry.date)
    elif "date" in entry.extra:
        record["date"] = entry.extra["date"]
    record.update({
        "quantity_produced": entry.quantity_produced,
        "stock_used": entry.stock_used,
        "total_completed": entry.total_completed,
        "notes": entry.notes,
        "updated_by": entry.updated_by,
        "previous_completed": entry.previous_completed,
    })
    record.update(entry.extra)
    return record


def bottle_record(bottle: Bottle) -> dict:
    record = {
        "deco_no": bottle.deco_no,
        "bottle_name": bottle.bottle_name,
        "quantity": bottle.quantity,
        "completed_qty": bottle.completed_qty,
        "inventory_used": bottle.inventory_used,
        "available_stock": bottle.available_stock,
        "status": bottle.status.value,
        "tracking_status": [tracking_entry_record(e) for e in bottle.tracking_status],
    }
    record.update(bottle.extra)
    return record


def item_record(item: Item) -> dict:
    record = {
        "_id": item.id,
        "bottle": [bottle_record(b) for b in item.bottles],
    }
    record.update(item.extra)
    return record


def order_record(order: Order) -> dict:
    record = {
        "order_number": order.order_number,
        "order_status": order.order_status.value,
        "items": [item_record(i) for i in order.items],
    }
    record.update(order.extra)
    return record


def summary_record(summary: UpdateSummary) -> dict:
    return {
        "deco_no": summary.deco_no,
        "bottle_name": summary.bottle_name,
        "previous_completed": summary.previous_completed,
        "new_completed": summary.new_completed,
        "quantity_produced": summary.quantity_produced,
        "stock_used": summary.stock_used,
        "remaining": summary.remaining,
        "status": summary.status.value,
    }
