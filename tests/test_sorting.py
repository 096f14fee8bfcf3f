"""
Tests for record ordering and sort state transitions.
"""

import random

import pytest

from sniview.core.models import Protocol, SortColumn, SortDirection, SortState
from sniview.domain.sorting import sort_records, timestamp_to_millis


class TestTimestampToMillis:
    """Tests for timestamp_to_millis."""

    def test_slash_dates(self):
        assert timestamp_to_millis("1970/01/01 00:00:01.500000") == 1500

    def test_dash_dates(self):
        assert timestamp_to_millis("1970-01-01 00:00:02.000") == 2000

    def test_ordering(self):
        earlier = timestamp_to_millis("2025/10/13 22:41:11.000001")
        later = timestamp_to_millis("2025/10/13 22:41:12.466126")
        assert earlier < later

    @pytest.mark.parametrize("value", ["", "garbage", "2025/13/45 99:99:99.0", "22:41:12"])
    def test_unparseable(self, value):
        assert timestamp_to_millis(value) is None


class TestSortRecords:
    """Tests for sort_records."""

    def test_no_state_keeps_order(self, sample_records):
        assert sort_records(sample_records) == sample_records
        assert sort_records(sample_records, SortState()) == sample_records

    def test_returns_new_list(self, sample_records):
        original = list(sample_records)
        result = sort_records(sample_records, SortState(SortColumn.DOMAIN, SortDirection.ASC))
        assert result is not sample_records
        assert sample_records == original

    def test_timestamp_is_chronological(self, sample_records):
        state = SortState(SortColumn.TIMESTAMP, SortDirection.ASC)
        result = sort_records(sample_records, state)
        assert [r.domain for r in result] == [
            "www.youtube.com",
            "assets.alicdn.com",
            "rr3.googlevideo.com",
            "api.example.org",
        ]

        state = SortState(SortColumn.TIMESTAMP, SortDirection.DESC)
        result = sort_records(sample_records, state)
        assert result[0].domain == "api.example.org"

    def test_text_is_case_insensitive(self, make_record):
        records = [make_record(domain="b.com"), make_record(domain="A.com"), make_record(domain="c.com")]
        result = sort_records(records, column=SortColumn.DOMAIN, direction=SortDirection.ASC)
        assert [r.domain for r in result] == ["A.com", "b.com", "c.com"]

    def test_target_flag(self, make_record):
        records = [make_record(domain="x", is_target=True), make_record(domain="y")]
        result = sort_records(records, SortState(SortColumn.IS_TARGET, SortDirection.ASC))
        assert [r.domain for r in result] == ["y", "x"]

    def test_stable_in_both_directions(self, make_record):
        """Test ties keep input order ascending and descending."""
        records = [
            make_record(domain="first", protocol=Protocol.UDP),
            make_record(domain="second", protocol=Protocol.TCP),
            make_record(domain="third", protocol=Protocol.UDP),
            make_record(domain="fourth", protocol=Protocol.TCP),
        ]
        asc = sort_records(records, SortState(SortColumn.PROTOCOL, SortDirection.ASC))
        assert [r.domain for r in asc] == ["second", "fourth", "first", "third"]

        desc = sort_records(records, SortState(SortColumn.PROTOCOL, SortDirection.DESC))
        assert [r.domain for r in desc] == ["first", "third", "second", "fourth"]

    def test_unparseable_timestamps_last(self, make_record):
        records = [
            make_record(domain="bad", timestamp="not a time"),
            make_record(domain="late", timestamp="2025/10/13 22:41:12.000000"),
            make_record(domain="early", timestamp="2025/10/13 22:41:10.000000"),
        ]
        for direction in SortDirection:
            result = sort_records(records, SortState(SortColumn.TIMESTAMP, direction))
            assert result[-1].domain == "bad"

    @pytest.fixture
    def shuffled_records(self, make_record):
        """Records with distinct timestamp, domain, source and destination, in scrambled order."""
        def factory(seed):
            records = [
                make_record(
                    domain=f"host{i:02d}.example.com",
                    timestamp=f"2025/10/13 22:{i // 60:02d}:{i % 60:02d}.{i:06d}",
                    protocol=Protocol.UDP if i % 3 else Protocol.TCP,
                    is_target=i % 2 == 0,
                    source=f"192.168.1.{i}:{40000 + i}",
                    destination=f"10.0.{i}.1:443",
                )
                for i in range(40)
            ]
            random.Random(seed).shuffle(records)
            return records
        return factory

    @pytest.mark.parametrize("seed", range(5))
    @pytest.mark.parametrize("column", list(SortColumn))
    @pytest.mark.parametrize("direction", list(SortDirection))
    def test_idempotent(self, shuffled_records, seed, column, direction):
        """Test re-sorting a sorted list changes nothing, ties included."""
        state = SortState(column, direction)
        once = sort_records(shuffled_records(seed), state)
        assert sort_records(once, state) == once

    @pytest.mark.parametrize("seed", range(5))
    @pytest.mark.parametrize("column", [
        SortColumn.TIMESTAMP,
        SortColumn.DOMAIN,
        SortColumn.SOURCE,
        SortColumn.DESTINATION,
    ])
    def test_descending_reverses_ascending(self, shuffled_records, seed, column):
        """Test DESC is the exact reverse of ASC on a column without ties."""
        records = shuffled_records(seed)
        asc = sort_records(records, SortState(column, SortDirection.ASC))
        desc = sort_records(asc, SortState(column, SortDirection.DESC))

        assert desc == list(reversed(asc))
        assert sort_records(records, SortState(column, SortDirection.DESC)) == desc


class TestSortState:
    """Tests for SortState transitions and persistence form."""

    def test_cycle(self):
        state = SortState()
        state = state.toggle(SortColumn.DOMAIN)
        assert state == SortState(SortColumn.DOMAIN, SortDirection.ASC)
        state = state.toggle(SortColumn.DOMAIN)
        assert state == SortState(SortColumn.DOMAIN, SortDirection.DESC)
        state = state.toggle(SortColumn.DOMAIN)
        assert state == SortState()
        assert not state.active

    def test_new_column_starts_ascending(self):
        state = SortState(SortColumn.DOMAIN, SortDirection.DESC)
        assert state.toggle(SortColumn.SOURCE) == SortState(SortColumn.SOURCE, SortDirection.ASC)

    def test_dict_roundtrip(self):
        state = SortState(SortColumn.IS_TARGET, SortDirection.DESC)
        assert SortState.from_dict(state.to_dict()) == state
        assert SortState().to_dict() == {"column": None, "direction": None}

    @pytest.mark.parametrize("data", [
        None,
        [],
        "timestamp",
        {"column": "color", "direction": "asc"},
        {"column": "domain", "direction": "sideways"},
        {"column": "domain"},
    ])
    def test_invalid_restores_unsorted(self, data):
        assert SortState.from_dict(data) == SortState()
