import pytest
import sys
import os

# Add src to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from photogps.dedup import deduplicate, round_coordinate
from photogps.models import LocationRecord


@pytest.fixture
def track():
    return [
        LocationRecord(40.123449, -74.000001, altitude=5.0, timestamp=3, source_path="a.jpg"),
        LocationRecord(40.12341, -74.00003, altitude=None, timestamp=1, source_path="b.jpg"),
        LocationRecord(41.5, 2.25, altitude=-3.0, timestamp=None, source_path="c.jpg"),
        LocationRecord(40.123451, -74.0, altitude=7.0, timestamp=2, source_path="d.jpg"),
        LocationRecord(41.50001, 2.24999, altitude=1.0, timestamp=4, source_path="e.jpg"),
    ]


class TestRoundCoordinate:
    def test_half_rounds_away_from_zero(self):
        assert round_coordinate(0.00005, 4) == 0.0001
        assert round_coordinate(-0.00005, 4) == -0.0001
        assert round_coordinate(2.5, 0) == 3.0
        assert round_coordinate(-2.5, 0) == -3.0

    def test_uses_the_written_decimal_value(self):
        assert round_coordinate(1.00005, 4) == 1.0001

    def test_already_rounded_value_is_unchanged(self):
        assert round_coordinate(40.1235, 4) == 40.1235

    def test_precision_beyond_float_digits(self):
        assert round_coordinate(40.123456789012, 30) == 40.123456789012
        assert round_coordinate(-74.0, 400) == -74.0
        assert round_coordinate(1e-300, 299) == 0.0

    def test_negative_precision_rounds_to_tens(self):
        assert round_coordinate(45.0, -1) == 50.0
        assert round_coordinate(-44.9, -1) == -40.0
        assert round_coordinate(123.4, -2) == 100.0


class TestDeduplicate:
    def test_keeps_first_seen_record_per_key(self, track):
        unique = deduplicate(track, 4)

        assert [r.source_path for r in unique] == ["a.jpg", "c.jpg", "d.jpg"]

    def test_kept_records_carry_rounded_coordinates(self, track):
        first = deduplicate(track, 4)[0]

        assert first.latitude == 40.1234
        assert first.longitude == -74.0
        assert first.altitude == 5.0
        assert first.timestamp == 3

    def test_input_records_are_not_modified(self, track):
        original = list(track)
        deduplicate(track, 2)
        assert track == original
        assert track[0].latitude == 40.123449

    def test_keys_are_unique(self, track):
        for precision in range(0, 7):
            unique = deduplicate(track, precision)
            keys = [(round_coordinate(r.latitude, precision), round_coordinate(r.longitude, precision)) for r in unique]
            assert len(keys) == len(set(keys))

    def test_idempotent(self, track):
        for precision in range(0, 7):
            once = deduplicate(track, precision)
            assert deduplicate(once, precision) == once

    def test_lower_precision_merges_more(self, track):
        assert len(deduplicate(track, 6)) == 5
        assert len(deduplicate(track, 0)) == 2

    def test_any_precision_is_accepted(self, track):
        assert len(deduplicate(track, 30)) == 5
        assert len(deduplicate(track, -1)) == 2

    def test_empty_input(self):
        assert deduplicate([], 4) == []
