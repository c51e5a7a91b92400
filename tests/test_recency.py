"""Tests for recent-row selection."""

from datetime import datetime

import pytest

from worship_attendance.attendance import parse_sort_key, select_recent
from worship_attendance.sheets.models import RowRecord


def _rows(dates):
    return [
        RowRecord(row_index=i + 2, values=("ts", date, str(i))) for i, date in enumerate(dates)
    ]


class TestParseSortKey:
    """Test service-date sort keys."""

    def test_empty_is_zero(self):
        assert parse_sort_key("") == 0
        assert parse_sort_key(None) == 0

    def test_plain_number(self):
        assert parse_sort_key("42") == 42.0
        assert parse_sort_key("45296.5") == 45296.5
        assert parse_sort_key("-3") == -3.0
        assert parse_sort_key("1e3") == 1000.0

    def test_date_string(self):
        """Should return epoch seconds in local time."""
        expected = datetime(2024, 3, 10).timestamp()
        assert parse_sort_key("2024-03-10") == expected
        assert parse_sort_key("3/10/2024") == expected
        assert parse_sort_key("March 10, 2024") == expected

    def test_garbage_is_zero(self):
        assert parse_sort_key("not a date at all") == 0
        assert parse_sort_key("???") == 0

    @pytest.mark.parametrize("value", ["٣", "٣/١٠/2024", "４２"])
    def test_non_ascii_digits_are_zero(self, value):
        assert parse_sort_key(value) == 0

    def test_later_dates_sort_higher(self):
        assert parse_sort_key("3/17/2024") > parse_sort_key("3/10/2024")


class TestSelectRecent:
    """Test the tail-then-sort selection."""

    def test_fewer_than_limit_returns_all(self):
        rows = _rows(["1/7/2024", "1/21/2024", "1/14/2024"])
        entries = select_recent(rows)
        assert [e.row_index for e in entries] == [3, 4, 2]

    def test_no_rows(self):
        assert select_recent([]) == []

    def test_takes_physical_tail_before_sorting(self):
        """A late date high up the sheet is never surfaced."""
        dates = ["12/31/2030"] + [f"1/{d}/2024" for d in range(1, 12)]
        rows = _rows(dates)
        entries = select_recent(rows)

        assert len(entries) == 10
        assert all(e.row_index >= 4 for e in entries)
        assert 2 not in [e.row_index for e in entries]

    def test_sorted_newest_first(self):
        dates = [f"1/{d}/2024" for d in (3, 1, 9, 2, 8, 4, 7, 5, 6, 10, 12, 11)]
        entries = select_recent(_rows(dates))
        labels = [e.label for e in entries]
        assert labels == [f"1/{d}/2024" for d in (12, 11, 10, 9, 8, 7, 6, 5, 4, 2)]

    def test_unparseable_dates_sort_last(self):
        entries = select_recent(_rows(["", "1/7/2024", "pending"]))
        assert entries[0].row_index == 3
        assert {e.row_index for e in entries[1:]} == {2, 4}

    def test_ties_keep_sheet_order(self):
        entries = select_recent(_rows(["1/7/2024", "1/7/2024", "1/7/2024"]))
        assert [e.row_index for e in entries] == [2, 3, 4]

    @pytest.mark.parametrize("limit", [1, 5])
    def test_custom_limit(self, limit):
        rows = _rows([f"1/{d}/2024" for d in range(1, 13)])
        entries = select_recent(rows, limit=limit)
        assert len(entries) == limit
        assert entries[0].row_index == 13
