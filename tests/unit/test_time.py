"""Tests for registry time helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from petiteplatypus.core.time import (
    format_utc_iso8601,
    from_epoch_millis,
    get_current_utc,
    to_epoch_millis,
)


def test_current_time_is_utc():
    now = get_current_utc()

    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)


def test_to_epoch_millis():
    dt = datetime(2025, 9, 6, 15, 50, 20, 641000, tzinfo=timezone.utc)

    assert to_epoch_millis(dt) == 1757173820641


def test_naive_datetime_treated_as_utc():
    assert to_epoch_millis(datetime(1970, 1, 1, 0, 0, 1)) == 1000


def test_other_timezone_converted():
    plus_two = timezone(timedelta(hours=2))

    assert to_epoch_millis(datetime(1970, 1, 1, 2, 0, 0, tzinfo=plus_two)) == 0


def test_sub_millisecond_precision_truncated():
    assert to_epoch_millis(datetime(1970, 1, 1, 0, 0, 0, 999, tzinfo=timezone.utc)) == 0


def test_from_epoch_millis_round_trip():
    dt = from_epoch_millis(1757173820641)

    assert dt == datetime(2025, 9, 6, 15, 50, 20, 641000, tzinfo=timezone.utc)
    assert to_epoch_millis(dt) == 1757173820641


def test_format_utc_iso8601():
    plus_two = timezone(timedelta(hours=2))

    assert format_utc_iso8601(datetime(2025, 10, 8, 14, 30, tzinfo=plus_two)) == "2025-10-08T12:30:00+00:00"
    assert format_utc_iso8601(datetime(2025, 10, 8, 12, 30)) == "2025-10-08T12:30:00+00:00"
