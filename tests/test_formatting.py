from datetime import datetime, timezone

import pytest
from freezegun import freeze_time

from KubeStatus.utils.formatting import (
    format_cell_value,
    format_duration,
    parse_timestamp,
    seconds_since,
)


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "00"),
        (7, "07"),
        (59, "59"),
        (60, "01:00"),
        (61, "01:01"),
        (3599, "59:59"),
        (3600, "01:00:00"),
        (86399, "23:59:59"),
        (86400, "1 00:00:00"),
        (90061, "1 01:01:01"),
        (12 * 86400 + 5, "12 00:00:05"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_format_duration_clamps_negative_values():
    assert format_duration(-30) == "00"


def test_format_duration_truncates_fractions():
    assert format_duration(59.9) == "59"


class TestTimestamps:
    def test_parse_timestamp_is_timezone_aware(self):
        parsed = parse_timestamp("2025-06-16T12:00:00Z")
        assert parsed == datetime(2025, 6, 16, 12, 0, tzinfo=timezone.utc)

    def test_parse_timestamp_assumes_utc_for_naive_values(self):
        assert parse_timestamp(datetime(2025, 1, 1)).tzinfo is timezone.utc

    @pytest.mark.parametrize("value", [None, "", "yesterday", 42])
    def test_unparsable_timestamps(self, value):
        assert parse_timestamp(value) is None

    @freeze_time("2025-06-16T14:00:00Z")
    def test_seconds_since(self):
        assert seconds_since("2025-06-16T13:58:30Z") == 90

    @freeze_time("2025-06-16T14:00:00Z")
    def test_seconds_since_future_timestamp_is_negative(self):
        # Clock skew; format_duration clamps it.
        assert seconds_since("2025-06-16T14:00:10Z") == -10


class TestCellValues:
    def test_none_is_blank(self):
        assert format_cell_value(None) == ""

    def test_lists_are_comma_joined(self):
        assert format_cell_value(["a", "b"], "list") == "a,b"

    def test_booleans(self):
        assert format_cell_value(True) == "true"
        assert format_cell_value(False) == "false"

    def test_mappings(self):
        assert format_cell_value({"app": "web", "tier": "fe"}) == "app=web,tier=fe"

    def test_numbers(self):
        assert format_cell_value(3) == "3"
