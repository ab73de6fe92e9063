"""Application service: Apply Progress use case.

Runs one load-mutate-save cycle while holding the dataset's exclusive
lock, so concurrent batches are serialised instead of overwriting each
other.  The dataset is saved once, after every update in the batch has
been applied; a failing update therefore leaves the persisted file
untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from bottletrack.application.dto import ProgressResult
from bottletrack.domain.exceptions import (
    DatasetUnreadableError,
    PersistenceError,
    ValidationError,
)
from bottletrack.domain.model.value_objects import ProgressUpdate
from bottletrack.domain.repository.dataset_repository import DatasetRepository
from bottletrack.domain.service.progress_reconciler import (
    DEFAULT_UPDATED_BY,
    ProgressReconciler,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ApplyProgressHandler:

    def __init__(
        self,
        dataset_repo: DatasetRepository,
        updated_by: str = DEFAULT_UPDATED_BY,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._dataset_repo = dataset_repo
        self._reconciler = ProgressReconciler(updated_by=updated_by)
        self._clock = clock

    def handle(
        self,
        order_number: str,
        item_id: str,
        updates: list[ProgressUpdate],
    ) -> ProgressResult:
        """Apply a batch of bottle updates to one item of an order.

        Steps:
        1. Lock and load the dataset (refuse if it is unreadable).
        2. Let the reconciler apply every update, aborting on the first
           invalid one.
        3. Persist the whole dataset and return the updated order.
        """
        if not order_number or not item_id:
            raise ValidationError("Order number and item id are required")

        timestamp = self._clock()

        with self._dataset_repo.lock():
            loaded = self._dataset_repo.load()
            if not loaded.is_readable:
                raise DatasetUnreadableError(
                    "Failed to read the order dataset; no updates were applied"
                )

            order, summaries = self._reconciler.apply(
                loaded.dataset, order_number, item_id, updates, timestamp
            )

            if not self._dataset_repo.save(loaded.dataset):
                raise PersistenceError("Failed to save updates to database")

        logger.info(
            "Applied %d update(s) to order %s item %s (order status %s)",
            len(summaries),
            order_number,
            item_id,
            order.order_status.value,
        )
        return ProgressResult(order=order, updates=summaries, timestamp=timestamp)
