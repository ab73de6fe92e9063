"""Application service: List Orders use case (query)."""

from __future__ import annotations

from bottletrack.domain.model.order import Order
from bottletrack.domain.repository.dataset_repository import DatasetRepository


class ListOrdersHandler:

    def __init__(self, dataset_repo: DatasetRepository) -> None:
        self._dataset_repo = dataset_repo

    def handle(self) -> list[Order]:
        # Lock-free snapshot; an unreadable file has already been logged
        # by the repository and reads as no orders.
        return list(self._dataset_repo.load().dataset.orders)
