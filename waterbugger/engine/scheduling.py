"""Reminder timing decisions.

Pure functions over an explicit ``now``. Every "earliest acceptable time"
is the latest of a small candidate set, so a result never precedes 8:00,
never precedes now and never undercuts the spacing from the previous
reminder.

Arithmetic and comparisons run in UTC; only the 8:00 floor and midnight
are built on the local wall clock. Results are UTC datetimes.
"""

from datetime import datetime, timedelta, timezone
from typing import Tuple

from waterbugger.db.models import DrinkReminderStatus, ReminderState, ReminderTag
from waterbugger.utils.constants import (
    CATCH_UP_MIN_SECONDS,
    DAY_START_HOUR,
    ROLLOVER_WINDOW_MINUTES,
    SLEEP_REMINDER_EXPIRY_HOURS,
)
from waterbugger.utils.time_utils import local_time_today, next_midnight, start_of_day


def _utc(dt: datetime) -> datetime:
    return dt.astimezone(timezone.utc)


def latest_of(*candidates: datetime) -> datetime:
    """Latest-wins combinator over candidate instants."""
    return max(_utc(candidate) for candidate in candidates)


def day_start(now: datetime) -> datetime:
    """Today at 8:00 local time, as UTC."""
    return _utc(local_time_today(now, DAY_START_HOUR))


def initial_reminder(now: datetime, reminder_delay: int) -> ReminderState:
    """First reminder of a session: at 8:00, or reminder_delay from now if later."""
    return ReminderState(
        next_reminder_time=latest_of(
            day_start(now), _utc(now) + timedelta(minutes=reminder_delay)
        ),
        tag=ReminderTag.REGULAR,
    )


def reminder_after_drink(now: datetime, reminder_interval: int) -> ReminderState:
    """Regular cadence restarted by a drink."""
    return ReminderState(
        next_reminder_time=_utc(now) + timedelta(minutes=reminder_interval),
        tag=ReminderTag.REGULAR,
    )


def rescheduled_reminder(now: datetime, reminder_interval: int) -> ReminderState:
    """Fresh regular reminder after the cadence settings changed."""
    return ReminderState(
        next_reminder_time=latest_of(
            day_start(now), _utc(now) + timedelta(minutes=reminder_interval)
        ),
        tag=ReminderTag.REGULAR,
    )


def postponed_reminder(now: datetime, reminder_delay: int) -> ReminderState:
    """The user said "not yet"."""
    return ReminderState(
        next_reminder_time=_utc(now) + timedelta(minutes=reminder_delay),
        tag=ReminderTag.POSTPONED,
    )


def catch_up_reminder(
    now: datetime, previous: ReminderState, reminder_delay: int
) -> ReminderState:
    """Follow-up for a reminder whose time has already passed.

    Keeps the previous tag. The new time is spaced reminder_delay after the
    missed one, but never before 8:00 and never in the past.
    """
    return ReminderState(
        next_reminder_time=latest_of(
            day_start(now),
            _utc(now) + timedelta(seconds=CATCH_UP_MIN_SECONDS),
            _utc(previous.next_reminder_time) + timedelta(minutes=reminder_delay),
        ),
        tag=previous.tag,
    )


def is_due(now: datetime, reminder: ReminderState) -> bool:
    """Whether the reminder should already have fired."""
    return _utc(now) >= _utc(reminder.next_reminder_time)


def reminder_expiry(
    reminder: ReminderState, reminder_interval: int, reminder_delay: int
) -> datetime:
    """When an undelivered drink reminder stops being relevant."""
    when = _utc(reminder.next_reminder_time)
    if reminder.tag == ReminderTag.POSTPONED:
        return when + timedelta(minutes=reminder_delay)
    return when + timedelta(minutes=reminder_interval)


def sleep_reminder_window(now: datetime) -> Tuple[datetime, datetime]:
    """Next midnight and the moment the sleep reminder expires."""
    when = _utc(next_midnight(now))
    return when, when + timedelta(hours=SLEEP_REMINDER_EXPIRY_HOURS)


def is_real_drink(delta: int, glass_size: int) -> bool:
    """More than half a glass counts as a drink; less is a correction."""
    return delta > glass_size / 2


def in_rollover_window(now: datetime) -> bool:
    """Within the first half hour after local midnight."""
    window_end = _utc(start_of_day(now)) + timedelta(minutes=ROLLOVER_WINDOW_MINUTES)
    return _utc(now) <= window_end


def status_for(reminder: ReminderState) -> DrinkReminderStatus:
    """Pending status matching a reminder's tag."""
    if reminder.tag == ReminderTag.POSTPONED:
        return DrinkReminderStatus.POSTPONED_PENDING
    return DrinkReminderStatus.REGULAR_PENDING
