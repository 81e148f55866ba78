"""Tests for timestamp parsing."""

from datetime import datetime, timezone

import pytest

from maintenance_score.time_utils import ensure_utc, parse_timestamp


def test_parse_timestamp_utc_suffix():
    assert parse_timestamp("2024-01-02T03:04:05Z") == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_parse_timestamp_converts_offset():
    assert parse_timestamp("2024-01-02T05:04:05+02:00") == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "value, microsecond",
    [
        ("2024-01-02T03:04:05.1Z", 100000),
        ("2024-01-02T03:04:05.12345Z", 123450),
        ("2024-01-02T03:04:05.123456Z", 123456),
        ("2024-01-02T03:04:05.123456789Z", 123456),
    ],
)
def test_parse_timestamp_any_fraction_length(value, microsecond):
    assert parse_timestamp(value).microsecond == microsecond


def test_parse_timestamp_lowercase_separators():
    assert parse_timestamp("2024-01-02t03:04:05z") == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "value",
    ["", "yesterday", "2024-01-02T03:04:05", "2024-01-02", "2024-13-02T03:04:05Z"],
)
def test_parse_timestamp_rejects_invalid(value):
    with pytest.raises(ValueError):
        parse_timestamp(value)


def test_ensure_utc_assumes_utc_for_naive():
    assert ensure_utc(datetime(2024, 1, 1)).tzinfo is timezone.utc
