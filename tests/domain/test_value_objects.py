"""Unit tests for domain value objects."""

import pytest

from bottletrack.domain.exceptions import ValidationError
from bottletrack.domain.model.value_objects import ProgressUpdate, coerce_count


# ── coerce_count ─────────────────────────────────────────────────────────────


class TestCoerceCount:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (12, 12),
            ("12", 12),
            (" 7", 7),
            ("12abc", 12),
            ("3.9", 3),
            (3.9, 3),
            ("-4", -4),
            ("+5", 5),
        ],
    )
    def test_integer_like_values(self, raw, expected):
        assert coerce_count(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, "", "   ", "abc", "x12", True, False, float("nan"), float("inf"), [3], {}],
    )
    def test_non_numeric_reads_as_zero(self, raw):
        assert coerce_count(raw) == 0


# ── ProgressUpdate ───────────────────────────────────────────────────────────


class TestProgressUpdate:

    def test_defaults(self):
        u = ProgressUpdate("D-1")
        assert u.quantity_produced == 0
        assert u.stock_used == 0
        assert u.total_completed == 0
        assert u.notes == ""

    def test_of_coerces_counts(self):
        u = ProgressUpdate.of("D-1", "10", "five", 55.0, notes="night shift")
        assert u == ProgressUpdate("D-1", 10, 0, 55, "night shift")

    def test_of_defaults_missing_notes_to_empty(self):
        assert ProgressUpdate.of("D-1", notes=None).notes == ""

    def test_missing_deco_no_rejected(self):
        with pytest.raises(ValidationError, match="deco_no"):
            ProgressUpdate.of(None, 1, 0, 1)

    @pytest.mark.parametrize("deco_no", ["", True, 1.5, ["D-1"]])
    def test_non_identifier_deco_no_rejected(self, deco_no):
        with pytest.raises(ValidationError, match="deco_no"):
            ProgressUpdate.of(deco_no, 1, 0, 1)

    def test_integer_deco_no_kept_as_given(self):
        assert ProgressUpdate.of(17, 1, 0, 1).deco_no == 17

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError, match="stock_used cannot be negative"):
            ProgressUpdate.of("D-1", 1, "-2", 1)

    def test_expected_total(self):
        u = ProgressUpdate("D-1", quantity_produced=10, stock_used=5, total_completed=55)
        assert u.expected_total(40) == 55

    def test_has_activity(self):
        assert ProgressUpdate("D-1", quantity_produced=1).has_activity
        assert ProgressUpdate("D-1", stock_used=1).has_activity
        assert not ProgressUpdate("D-1", total_completed=30).has_activity
