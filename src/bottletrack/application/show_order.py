"""Application service: Show Order use case (query)."""

from __future__ import annotations

from bottletrack.domain.model.order import Order
from bottletrack.domain.repository.dataset_repository import DatasetRepository


class ShowOrderHandler:

    def __init__(self, dataset_repo: DatasetRepository) -> None:
        self._dataset_repo = dataset_repo

    def handle(self, order_number: str) -> Order:
        return self._dataset_repo.load().dataset.find_order(order_number)
