"""Tests for store-local calendar days."""

from datetime import UTC, datetime

from shared.utils.dates import store_date


def test_late_evening_utc_is_the_next_day_in_johannesburg():
    assert store_date(datetime(2025, 3, 14, 22, 30, tzinfo=UTC), "Africa/Johannesburg") == "2025-03-15"


def test_same_day_when_offset_does_not_cross_midnight():
    assert store_date(datetime(2025, 3, 14, 9, 0, tzinfo=UTC), "Africa/Johannesburg") == "2025-03-14"


def test_naive_datetimes_are_read_as_utc():
    assert store_date(datetime(2025, 3, 14, 23, 0), "Africa/Johannesburg") == "2025-03-15"


def test_defaults_to_configured_timezone():
    assert store_date(datetime(2025, 3, 14, 22, 30, tzinfo=UTC)) == "2025-03-15"
