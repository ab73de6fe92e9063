"""Unit tests for the Order aggregate and its bottles."""

from datetime import datetime, timezone

import pytest

from bottletrack.domain.exceptions import (
    ItemNotFoundError,
    QuantityExceededError,
    SubItemNotFoundError,
)
from bottletrack.domain.model.order import (
    ProductionStatus,
    derive_bottle_status,
    derive_order_status,
)
from bottletrack.domain.model.value_objects import ProgressUpdate
from tests.fakes import make_bottle, make_order

NOW = datetime(2026, 10, 18, 8, 30, tzinfo=timezone.utc)

PENDING = ProductionStatus.PENDING
IN_PROGRESS = ProductionStatus.IN_PROGRESS
COMPLETED = ProductionStatus.COMPLETED


# ── Status derivation ────────────────────────────────────────────────────────


class TestBottleStatus:

    @pytest.mark.parametrize(
        "completed, quantity, expected",
        [
            (0, 100, PENDING),
            (1, 100, IN_PROGRESS),
            (99, 100, IN_PROGRESS),
            (100, 100, COMPLETED),
            (0, 0, PENDING),
        ],
    )
    def test_derive_bottle_status(self, completed, quantity, expected):
        assert derive_bottle_status(completed, quantity) is expected

    def test_status_follows_counters(self):
        b = make_bottle("D-1", quantity=10)
        assert b.status is PENDING
        b.completed_qty = 4
        assert b.status is IN_PROGRESS
        b.completed_qty = 10
        assert b.status is COMPLETED

    def test_parse_unknown_status_reads_as_pending(self):
        assert ProductionStatus.parse("Shipped") is PENDING
        assert ProductionStatus.parse(None) is PENDING
        assert ProductionStatus.parse("In Progress") is IN_PROGRESS


class TestOrderStatus:

    def test_all_completed(self):
        assert derive_order_status([COMPLETED, COMPLETED]) is COMPLETED

    def test_any_in_progress(self):
        assert derive_order_status([COMPLETED, IN_PROGRESS, PENDING]) is IN_PROGRESS

    def test_completed_and_pending_mix_is_pending(self):
        assert derive_order_status([COMPLETED, PENDING]) is PENDING

    def test_in_progress_order_stays_in_progress(self):
        assert derive_order_status([PENDING, PENDING], previous=IN_PROGRESS) is IN_PROGRESS

    def test_in_progress_order_completes(self):
        assert derive_order_status([COMPLETED], previous=IN_PROGRESS) is COMPLETED

    def test_no_bottles_counts_as_completed(self):
        assert derive_order_status([]) is COMPLETED

    def test_refresh_status_scans_every_item(self):
        order = make_order(
            "O-1",
            {
                "I-1": [make_bottle("D-1", quantity=10, completed_qty=10)],
                "I-2": [make_bottle("D-2", quantity=10, completed_qty=3)],
            },
        )
        assert order.refresh_status() is IN_PROGRESS
        assert order.order_status is IN_PROGRESS


# ── Bottle.record_progress ───────────────────────────────────────────────────


class TestRecordProgress:

    def test_applies_total_and_inventory(self):
        b = make_bottle("D-1", quantity=100, completed_qty=40)
        previous = b.record_progress(
            ProgressUpdate("D-1", 10, 5, 55, "first run"), NOW, "bottle_team"
        )
        assert previous == 40
        assert b.completed_qty == 55
        assert b.inventory_used == 5
        assert b.remaining_quantity == 45

    def test_appends_tracking_entry(self):
        b = make_bottle("D-1", quantity=100, completed_qty=40)
        b.record_progress(ProgressUpdate("D-1", 10, 5, 55, "first run"), NOW, "line_2")

        [entry] = b.tracking_status
        assert entry.date == NOW
        assert entry.quantity_produced == 10
        assert entry.stock_used == 5
        assert entry.total_completed == 55
        assert entry.notes == "first run"
        assert entry.updated_by == "line_2"
        assert entry.previous_completed == 40

    def test_no_entry_without_activity(self):
        b = make_bottle("D-1", quantity=100, completed_qty=40)
        b.record_progress(ProgressUpdate("D-1", 0, 0, 100), NOW, "bottle_team")
        assert b.tracking_status == []
        assert b.status is COMPLETED

    def test_total_above_quantity_rejected(self):
        b = make_bottle("D-1", bottle_name="Flint 250ml", quantity=100, completed_qty=40)
        with pytest.raises(QuantityExceededError, match=r"\(150\) cannot exceed .* \(100\) for Flint 250ml"):
            b.record_progress(ProgressUpdate("D-1", 0, 0, 150), NOW, "bottle_team")
        assert b.completed_qty == 40
        assert b.tracking_status == []

    def test_draw_stock_floors_at_zero(self):
        b = make_bottle("D-1", available_stock=3)
        b.draw_stock(5)
        assert b.available_stock == 0


# ── Lookups ──────────────────────────────────────────────────────────────────


class TestLookups:

    def test_find_item_and_bottle(self):
        bottle = make_bottle("D-2")
        order = make_order("O-1", {"I-1": [make_bottle("D-1"), bottle]})
        assert order.find_item("I-1").find_bottle("D-2") is bottle

    def test_missing_item(self):
        order = make_order("O-1", {"I-1": []})
        with pytest.raises(ItemNotFoundError, match="Item not found in order") as info:
            order.find_item("I-9")
        assert info.value.detail() == {"order_number": "O-1", "item_id": "I-9"}

    def test_missing_bottle_names_the_code(self):
        order = make_order("O-1", {"I-1": [make_bottle("D-1")]})
        with pytest.raises(SubItemNotFoundError, match="deco_no D-9 not found") as info:
            order.find_item("I-1").find_bottle("D-9")
        assert info.value.detail() == {"deco_no": "D-9"}
