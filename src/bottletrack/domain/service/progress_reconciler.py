"""Domain service: Progress Reconciliation.

Applies a batch of production updates to one item of one order.  This is
a domain service rather than a method on Order because a single update
reaches across aggregates: consuming stock depletes the shared pool of
every order carrying the same bottle name.

Updates are applied in sequence, so a later update in the batch sees what
the earlier ones did.  The first failing update aborts the batch; the
caller must then discard the in-memory dataset instead of persisting it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from bottletrack.domain.model.dataset import Dataset
from bottletrack.domain.model.order import Order, ProductionStatus
from bottletrack.domain.model.value_objects import ProgressUpdate

logger = logging.getLogger(__name__)

DEFAULT_UPDATED_BY = "bottle_team"


@dataclass(frozen=True)
class UpdateSummary:
    """What one update did to its bottle."""

    deco_no: str
    bottle_name: str
    previous_completed: int
    new_completed: int
    quantity_produced: int
    stock_used: int
    remaining: int
    status: ProductionStatus


class ProgressReconciler:

    def __init__(self, updated_by: str = DEFAULT_UPDATED_BY) -> None:
        self._updated_by = updated_by

    def apply(
        self,
        dataset: Dataset,
        order_number: str,
        item_id: str,
        updates: list[ProgressUpdate],
        at: datetime,
    ) -> tuple[Order, list[UpdateSummary]]:
        """Apply *updates* to the item and refresh the order status.

        Raises OrderNotFoundError, ItemNotFoundError, SubItemNotFoundError
        or QuantityExceededError on the first update that cannot be applied.
        """
        order = dataset.find_order(order_number)
        item = order.find_item(item_id)

        summaries: list[UpdateSummary] = []
        for update in updates:
            bottle = item.find_bottle(update.deco_no)
            previous = bottle.record_progress(update, at, self._updated_by)

            expected = update.expected_total(previous)
            if update.total_completed != expected:
                # The caller's total wins; the ledger may now disagree.
                logger.warning(
                    "Reconciliation mismatch for %s (%s): previous=%d "
                    "produced=%d stock_used=%d expected=%d provided=%d",
                    bottle.bottle_name,
                    bottle.deco_no,
                    previous,
                    update.quantity_produced,
                    update.stock_used,
                    expected,
                    update.total_completed,
                )

            if update.stock_used > 0:
                dataset.draw_stock(bottle.bottle_name, update.stock_used)

            summaries.append(
                UpdateSummary(
                    deco_no=bottle.deco_no,
                    bottle_name=bottle.bottle_name,
                    previous_completed=previous,
                    new_completed=bottle.completed_qty,
                    quantity_produced=update.quantity_produced,
                    stock_used=update.stock_used,
                    remaining=bottle.remaining_quantity,
                    status=bottle.status,
                )
            )

        order.refresh_status()
        return order, summaries
