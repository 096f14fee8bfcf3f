"""
Tests for the filter query language.
"""

import pytest

from sniview.core.models import Protocol
from sniview.domain.filtering import FilterQuery, filter_records, parse_filter


class TestParseFilter:
    """Tests for parse_filter."""

    def test_empty(self):
        assert parse_filter("").is_empty
        assert parse_filter("   ").is_empty
        assert parse_filter("+ +").is_empty

    def test_field_and_global_terms(self):
        """Test terms split on + into field and bare terms."""
        query = parse_filter("Domain:Google+domain:youtube+protocol:UDP+192.168")

        assert query.field_terms == {"domain": ["google", "youtube"], "protocol": ["udp"]}
        assert query.global_terms == ["192.168"]

    def test_leading_colon_is_global(self):
        """Test a colon at position 0 does not make a field term."""
        query = parse_filter(":443")
        assert query.field_terms == {}
        assert query.global_terms == [":443"]

    def test_value_keeps_later_colons(self):
        query = parse_filter("source:10.0.0.5:60000")
        assert query.field_terms == {"source": ["10.0.0.5:60000"]}


class TestFilterRecords:
    """Tests for filter_records."""

    def test_empty_filter_returns_all(self, sample_records):
        assert filter_records(sample_records, "") == sample_records

    def test_or_within_field(self, sample_records):
        """Test values for the same field are OR-combined."""
        result = filter_records(sample_records, "domain:youtube+domain:alicdn")
        assert [r.domain for r in result] == ["assets.alicdn.com", "www.youtube.com"]

    def test_and_across_fields(self, sample_records):
        """Test different fields are AND-combined."""
        result = filter_records(sample_records, "domain:google+protocol:tcp")
        assert result == []

        result = filter_records(sample_records, "domain:google+protocol:udp")
        assert [r.domain for r in result] == ["rr3.googlevideo.com"]

    def test_global_terms_search_visible_fields(self, sample_records):
        """Test bare terms match domain, source, protocol or destination."""
        assert [r.domain for r in filter_records(sample_records, "10.0.0.5")] == ["api.example.org"]
        assert len(filter_records(sample_records, "udp")) == 2
        assert [r.domain for r in filter_records(sample_records, "142.250")] == ["www.youtube.com"]

    def test_every_global_term_must_match(self, sample_records):
        result = filter_records(sample_records, "192.168.1.100+youtube")
        assert [r.domain for r in result] == ["www.youtube.com"]

    def test_global_terms_do_not_search_timestamp(self, sample_records):
        assert filter_records(sample_records, "22:41") == []

    def test_case_insensitive(self, sample_records):
        assert len(filter_records(sample_records, "DOMAIN:YouTube")) == 1

    @pytest.mark.parametrize("field_name", ["target", "istarget", "is_target"])
    def test_target_aliases(self, sample_records, field_name):
        """Test the boolean target flag reads as true/false text."""
        result = filter_records(sample_records, f"{field_name}:true")
        assert [r.domain for r in result] == ["rr3.googlevideo.com", "www.youtube.com"]

        result = filter_records(sample_records, f"{field_name}:false")
        assert len(result) == 2

    def test_unknown_field_reads_empty(self, sample_records):
        """Test unknown fields only match an empty value."""
        assert filter_records(sample_records, "color:red") == []
        assert filter_records(sample_records, "color:") == sample_records

    def test_preserves_order(self, make_record):
        records = [make_record(domain=f"{i}.example.com") for i in range(5)]
        assert filter_records(records, "example") == records

    def test_query_matches(self, make_record):
        query = FilterQuery(field_terms={"protocol": ["udp"]})
        assert query.matches(make_record(protocol=Protocol.UDP))
        assert not query.matches(make_record(protocol=Protocol.TCP))
