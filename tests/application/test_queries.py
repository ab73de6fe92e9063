"""Integration tests for the ListOrders and ShowOrder queries."""

import pytest

from bottletrack.application.list_orders import ListOrdersHandler
from bottletrack.application.show_order import ShowOrderHandler
from bottletrack.domain.exceptions import OrderNotFoundError
from bottletrack.domain.model.dataset import Dataset
from tests.fakes import FakeDatasetRepository, make_bottle, make_order


def _repo() -> FakeDatasetRepository:
    return FakeDatasetRepository(
        Dataset(
            orders=[
                make_order("O-1", {"I-1": [make_bottle("D-1")]}),
                make_order("O-2", {"I-2": [make_bottle("D-2")]}),
            ]
        )
    )


class TestListOrders:

    def test_returns_orders_in_stored_order(self):
        orders = ListOrdersHandler(_repo()).handle()
        assert [o.order_number for o in orders] == ["O-1", "O-2"]

    def test_does_not_lock_or_save(self):
        repo = _repo()
        ListOrdersHandler(repo).handle()
        assert repo.lock_acquisitions == 0
        assert repo.save_calls == 0

    def test_unreadable_dataset_lists_nothing(self):
        assert ListOrdersHandler(FakeDatasetRepository(unreadable=True)).handle() == []

    def test_empty_dataset_lists_nothing(self):
        assert ListOrdersHandler(FakeDatasetRepository()).handle() == []


class TestShowOrder:

    def test_found(self):
        order = ShowOrderHandler(_repo()).handle("O-2")
        assert order.find_item("I-2").find_bottle("D-2").deco_no == "D-2"

    def test_missing(self):
        with pytest.raises(OrderNotFoundError):
            ShowOrderHandler(_repo()).handle("O-9")
