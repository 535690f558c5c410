"""Tests for time utilities."""

from datetime import datetime
from zoneinfo import ZoneInfo

from waterbugger.utils.time_utils import (
    format_clock,
    format_relative_time,
    local_date,
    local_time_today,
    next_midnight,
    start_of_day,
)


def test_day_boundaries():
    """Start of day and next midnight in local time."""
    tz = ZoneInfo("America/New_York")
    now = datetime(2026, 3, 15, 14, 30, tzinfo=tz)

    assert start_of_day(now) == datetime(2026, 3, 15, 0, 0, tzinfo=tz)
    assert next_midnight(now) == datetime(2026, 3, 16, 0, 0, tzinfo=tz)
    assert local_time_today(now, 8) == datetime(2026, 3, 15, 8, 0, tzinfo=tz)


def test_local_date_crosses_midnight():
    """A UTC timestamp can fall on the previous local day."""
    now = datetime(2026, 3, 16, 9, 0, tzinfo=ZoneInfo("America/New_York"))
    stamp = datetime(2026, 3, 16, 2, 0, tzinfo=ZoneInfo("UTC"))  # 22:00 EDT on the 15th

    assert local_date(stamp, now).day == 15


def test_format_clock_uses_local_zone():
    """UTC instants are shown on the user's wall clock."""
    now = datetime(2026, 3, 16, 9, 0, tzinfo=ZoneInfo("Europe/Rome"))
    when = datetime(2026, 3, 16, 8, 35, tzinfo=ZoneInfo("UTC"))

    assert format_clock(when, now) == "09:35"


def test_format_relative_time():
    """Test relative time formatting."""
    now = datetime(2026, 3, 15, 12, 0, tzinfo=ZoneInfo("UTC"))

    assert format_relative_time(datetime(2026, 3, 15, 12, 5, tzinfo=ZoneInfo("UTC")), now) == (
        "in 5 minutes"
    )
    assert format_relative_time(datetime(2026, 3, 15, 14, 0, tzinfo=ZoneInfo("UTC")), now) == (
        "in 2 hours"
    )
    assert format_relative_time(datetime(2026, 3, 15, 11, 58, tzinfo=ZoneInfo("UTC")), now) == (
        "2 minutes ago"
    )
