"""Tests for the time grid."""

import pytest

from exam_scheduler.exceptions import InvalidDayCountError
from exam_scheduler.scheduler.constants import TIME_SLOTS, parse_day_label, parse_slot_label
from exam_scheduler.scheduler.grid import TimeGrid


class TestTimeGrid:
    """Tests for TimeGrid."""

    def test_size(self):
        assert TimeGrid(5).size == 40

    def test_scan_order_is_day_major(self):
        cells = list(TimeGrid(2).cells())
        assert cells[0] == (0, 0)
        assert cells[1] == (0, 1)
        assert cells[8] == (1, 0)
        assert len(cells) == 16

    def test_contains(self):
        grid = TimeGrid(2)
        assert grid.contains(1, 7)
        assert not grid.contains(2, 0)
        assert not grid.contains(0, 8)
        assert not grid.contains(-1, 0)

    def test_has_next_slot(self):
        grid = TimeGrid(1)
        assert grid.has_next_slot(6)
        assert not grid.has_next_slot(7)

    def test_labels(self):
        grid = TimeGrid(1)
        assert grid.day_label(0) == "Day 1"
        assert grid.slot_label(0) == "7:30-9:00"
        assert grid.slot_label(8) == ""

    @pytest.mark.parametrize("num_days", [0, -1, 2.5, "3", True])
    def test_invalid_day_count(self, num_days):
        with pytest.raises(InvalidDayCountError):
            TimeGrid(num_days)


class TestLabelParsing:
    """Tests for day and slot label parsing."""

    def test_parse_day_label(self):
        assert parse_day_label("Day 3") == 2
        assert parse_day_label(" day 1 ") == 0

    def test_parse_day_label_invalid(self):
        with pytest.raises(ValueError):
            parse_day_label("Monday")
        with pytest.raises(ValueError):
            parse_day_label("Day 0")

    def test_parse_slot_label(self):
        for index, label in enumerate(TIME_SLOTS):
            assert parse_slot_label(label) == index

    def test_parse_slot_label_invalid(self):
        with pytest.raises(ValueError):
            parse_slot_label("8:00-9:00")
