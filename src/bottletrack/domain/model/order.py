"""Order aggregate: orders, their items and the bottles being produced.

The Order is an aggregate root that owns its Items, and each Item owns
the Bottles (production sub-items) it is made of.  Bottle status is
derived from the counters and never stored independently; order status
is recomputed from the bottles after every batch.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from bottletrack.domain.exceptions import (
    ItemNotFoundError,
    QuantityExceededError,
    SubItemNotFoundError,
)
from bottletrack.domain.model.value_objects import ProgressUpdate


class ProductionStatus(Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, raw: object) -> ProductionStatus:
        """Map a stored value to a status; unknown values read as Pending."""
        for status in cls:
            if status.value == raw:
                return status
        return cls.PENDING


def derive_bottle_status(completed_qty: int, quantity: int) -> ProductionStatus:
    if quantity > 0 and completed_qty == quantity:
        return ProductionStatus.COMPLETED
    if completed_qty > 0:
        return ProductionStatus.IN_PROGRESS
    return ProductionStatus.PENDING


def derive_order_status(
    bottle_statuses: Iterable[ProductionStatus],
    previous: ProductionStatus = ProductionStatus.PENDING,
) -> ProductionStatus:
    """Aggregate bottle statuses into an order status.

    An order that was already In Progress stays In Progress until every
    bottle is Completed, even if all counters drop back to zero.
    """
    all_completed = True
    has_in_progress = False
    for status in bottle_statuses:
        if status is ProductionStatus.COMPLETED:
            continue
        all_completed = False
        if status is ProductionStatus.IN_PROGRESS:
            has_in_progress = True

    if all_completed:
        return ProductionStatus.COMPLETED
    if has_in_progress or previous is ProductionStatus.IN_PROGRESS:
        return ProductionStatus.IN_PROGRESS
    return ProductionStatus.PENDING


@dataclass(frozen=True)
class TrackingEntry:
    """One line of a bottle's append-only production log.

    ``date`` is None for stored entries whose date could not be read; the
    stored value is kept in ``extra``.
    """

    date: datetime | None
    quantity_produced: int
    stock_used: int
    total_completed: int
    notes: str
    updated_by: str
    previous_completed: int
    extra: dict = field(default_factory=dict, compare=False)


@dataclass
class Bottle:
    """A production unit within an item, identified by its deco code.

    ``quantity`` is the ordered amount and never changes here.
    ``available_stock`` mirrors the shared pool for ``bottle_name``; it is
    only ever changed through ``Dataset.draw_stock`` so every bottle with
    the same name moves together.
    """

    deco_no: str
    bottle_name: str
    quantity: int
    completed_qty: int = 0
    inventory_used: int = 0
    available_stock: int = 0
    tracking_status: list[TrackingEntry] = field(default_factory=list)
    extra: dict = field(default_factory=dict)

    @property
    def status(self) -> ProductionStatus:
        return derive_bottle_status(self.completed_qty, self.quantity)

    @property
    def remaining_quantity(self) -> int:
        return self.quantity - self.completed_qty

    def record_progress(
        self, update: ProgressUpdate, at: datetime, updated_by: str
    ) -> int:
        """Apply *update* to this bottle and return the previous total.

        The caller's ``total_completed`` replaces ``completed_qty`` as-is.
        A tracking entry is appended only when the update produced units
        or consumed stock.
        """
        if update.total_completed > self.quantity:
            raise QuantityExceededError(
                self.deco_no, self.bottle_name, update.total_completed, self.quantity
            )

        previous = self.completed_qty
        self.completed_qty = update.total_completed
        self.inventory_used += update.stock_used

        if update.has_activity:
            self.tracking_status.append(
                TrackingEntry(
                    date=at,
                    quantity_produced=update.quantity_produced,
                    stock_used=update.stock_used,
                    total_completed=update.total_completed,
                    notes=update.notes,
                    updated_by=updated_by,
                    previous_completed=previous,
                )
            )
        return previous

    def draw_stock(self, units: int) -> None:
        self.available_stock = max(0, self.available_stock - units)


@dataclass
class Item:
    id: str
    bottles: list[Bottle] = field(default_factory=list)
    extra: dict = field(default_factory=dict)

    def find_bottle(self, deco_no: str) -> Bottle:
        for bottle in self.bottles:
            if bottle.deco_no == deco_no:
                return bottle
        raise SubItemNotFoundError(deco_no)


@dataclass
class Order:
    """Aggregate root for a customer order in production.

    Orders are created by the ingestion process; this code base only
    reconstitutes and updates them.
    """

    order_number: str
    items: list[Item] = field(default_factory=list)
    order_status: ProductionStatus = ProductionStatus.PENDING
    extra: dict = field(default_factory=dict)

    def find_item(self, item_id: str) -> Item:
        for item in self.items:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(self.order_number, item_id)

    def bottles(self) -> Iterator[Bottle]:
        for item in self.items:
            yield from item.bottles

    def refresh_status(self) -> ProductionStatus:
        """Recompute ``order_status`` from every bottle of every item."""
        self.order_status = derive_order_status(
            (bottle.status for bottle in self.bottles()),
            previous=self.order_status,
        )
        return self.order_status
