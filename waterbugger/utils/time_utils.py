"""Local wall-clock helpers and human-readable time formatting."""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo


def local_now(tz: str) -> datetime:
    """Current time as an aware datetime in the given timezone."""
    return datetime.now(ZoneInfo(tz))


def local_time_today(now: datetime, hour: int, minute: int = 0) -> datetime:
    """The given wall-clock time on now's local date, in now's timezone."""
    return datetime.combine(now.date(), time(hour, minute), tzinfo=now.tzinfo)


def start_of_day(now: datetime) -> datetime:
    """Local midnight at the start of now's day."""
    return local_time_today(now, 0)


def next_midnight(now: datetime) -> datetime:
    """Local midnight at the start of the following day."""
    tomorrow = now.date() + timedelta(days=1)
    return datetime.combine(tomorrow, time(0), tzinfo=now.tzinfo)


def local_date(dt: datetime, now: datetime) -> date:
    """The calendar date of dt as seen from now's timezone."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(now.tzinfo).date()


def format_clock(dt: datetime, now: datetime) -> str:
    """Format an instant as HH:MM on now's local clock."""
    return dt.astimezone(now.tzinfo).strftime("%H:%M")


def format_relative_time(dt: datetime, now: datetime) -> str:
    """Format a datetime relative to now.

    Examples:
        "in 5 minutes"
        "in 2 hours"
        "2 minutes ago"
    """
    total_seconds = (dt - now).total_seconds()

    if total_seconds < 0:
        abs_seconds = abs(total_seconds)
        if abs_seconds < 3600:
            minutes = int(abs_seconds / 60)
            return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
        hours = int(abs_seconds / 3600)
        return f"{hours} hour{'s' if hours != 1 else ''} ago"

    if total_seconds < 3600:
        minutes = int(total_seconds / 60)
        return f"in {minutes} minute{'s' if minutes != 1 else ''}"
    hours = int(total_seconds / 3600)
    return f"in {hours} hour{'s' if hours != 1 else ''}"
