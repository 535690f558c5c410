"""Tests for the pure reminder timing functions."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from conftest import at
from waterbugger.db.models import DrinkReminderStatus, ReminderState, ReminderTag
from waterbugger.engine.scheduling import (
    catch_up_reminder,
    day_start,
    in_rollover_window,
    initial_reminder,
    is_due,
    is_real_drink,
    latest_of,
    postponed_reminder,
    reminder_after_drink,
    reminder_expiry,
    rescheduled_reminder,
    sleep_reminder_window,
    status_for,
)


def test_latest_of():
    """The latest candidate wins."""
    assert latest_of(at(8, 0), at(9, 5), at(7, 0)) == at(9, 5)


def test_day_start_uses_local_zone():
    """8:00 is local wall-clock time."""
    now = datetime(2026, 7, 1, 6, 30, tzinfo=ZoneInfo("Europe/Rome"))
    start = day_start(now)

    assert start == datetime(2026, 7, 1, 6, 0, tzinfo=timezone.utc)
    assert start.astimezone(ZoneInfo("Europe/Rome")).hour == 8


def test_initial_reminder():
    """8:00 floor before the day starts, delay after."""
    assert initial_reminder(at(7, 0), 5) == ReminderState(at(8, 0), ReminderTag.REGULAR)
    assert initial_reminder(at(9, 0), 5) == ReminderState(at(9, 5), ReminderTag.REGULAR)


def test_reminder_after_drink_has_no_floor():
    """A drink restarts the cadence from now, even early in the morning."""
    assert reminder_after_drink(at(6, 0), 30).next_reminder_time == at(6, 30)


def test_rescheduled_reminder():
    """Fresh reschedules respect the 8:00 floor."""
    assert rescheduled_reminder(at(6, 0), 30).next_reminder_time == at(8, 0)
    assert rescheduled_reminder(at(10, 0), 30).next_reminder_time == at(10, 30)


def test_postponed_reminder():
    """Postponing tags the reminder."""
    reminder = postponed_reminder(at(10, 0), 5)
    assert reminder == ReminderState(at(10, 5), ReminderTag.POSTPONED)


def test_postponed_reminder_during_fall_back_hour():
    """In the repeated hour the delay is still five real minutes ahead."""
    new_york = ZoneInfo("America/New_York")
    now = datetime(2026, 11, 1, 1, 50, tzinfo=new_york, fold=1)  # 01:50 EST, second pass

    reminder = postponed_reminder(now, 5)

    assert reminder.next_reminder_time >= now
    assert reminder.next_reminder_time == now.astimezone(timezone.utc) + timedelta(minutes=5)


def test_reminder_after_drink_across_spring_forward():
    """The skipped hour does not stretch the interval."""
    new_york = ZoneInfo("America/New_York")
    now = datetime(2026, 3, 8, 1, 45, tzinfo=new_york)  # 15 minutes before the jump

    reminder = reminder_after_drink(now, 30)

    assert reminder.next_reminder_time == datetime(2026, 3, 8, 7, 15, tzinfo=timezone.utc)
    assert reminder.next_reminder_time.astimezone(new_york).hour == 3


def test_catch_up_during_fall_back_hour_waits_for_day_start():
    """A reminder missed in the repeated hour waits for 8:00 standard time."""
    new_york = ZoneInfo("America/New_York")
    now = datetime(2026, 11, 1, 1, 10, tzinfo=new_york, fold=1)  # 06:10 UTC
    previous = ReminderState(datetime(2026, 11, 1, 6, 8, tzinfo=timezone.utc), ReminderTag.REGULAR)

    reminder = catch_up_reminder(now, previous, 5)

    assert reminder.next_reminder_time == datetime(2026, 11, 1, 13, 0, tzinfo=timezone.utc)
    assert reminder.next_reminder_time >= now


def test_catch_up_spacing_from_missed_reminder():
    """Shortly after a missed reminder, keep the delay spacing."""
    previous = ReminderState(at(9, 5), ReminderTag.POSTPONED)
    reminder = catch_up_reminder(at(9, 6), previous, 5)

    assert reminder.next_reminder_time == at(9, 10)
    assert reminder.tag == ReminderTag.POSTPONED


def test_catch_up_after_long_gap():
    """Long after a missed reminder, fire just after now."""
    previous = ReminderState(at(9, 5), ReminderTag.REGULAR)
    reminder = catch_up_reminder(at(12, 0), previous, 5)

    assert reminder.next_reminder_time == at(12, 0) + timedelta(seconds=1)


def test_catch_up_before_day_start():
    """A reminder missed overnight waits for 8:00."""
    previous = ReminderState(at(23, 0, day=1), ReminderTag.REGULAR)
    reminder = catch_up_reminder(at(3, 0), previous, 5)

    assert reminder.next_reminder_time == at(8, 0)


def test_is_due():
    """Due exactly at and after the reminder time."""
    reminder = ReminderState(at(9, 5), ReminderTag.REGULAR)
    assert not is_due(at(9, 4), reminder)
    assert is_due(at(9, 5), reminder)
    assert is_due(at(9, 6), reminder)


def test_reminder_expiry():
    """Regular reminders last an interval, postponed ones a delay."""
    regular = ReminderState(at(9, 0), ReminderTag.REGULAR)
    postponed = ReminderState(at(9, 0), ReminderTag.POSTPONED)

    assert reminder_expiry(regular, 30, 5) == at(9, 30)
    assert reminder_expiry(postponed, 30, 5) == at(9, 5)


def test_sleep_reminder_window():
    """Next midnight, lasting 8 hours."""
    when, expiry = sleep_reminder_window(at(18, 0))
    assert when == at(0, 0, day=3)
    assert expiry == at(8, 0, day=3)


def test_sleep_reminder_window_at_midnight():
    """At midnight exactly, the next one is a day away."""
    when, _ = sleep_reminder_window(at(0, 0))
    assert when == at(0, 0, day=3)


def test_is_real_drink():
    """Strictly more than half a glass."""
    assert is_real_drink(300, 250)
    assert is_real_drink(126, 250)
    assert not is_real_drink(125, 250)
    assert not is_real_drink(50, 250)
    assert not is_real_drink(-250, 250)


def test_in_rollover_window():
    """The first half hour after midnight, inclusive."""
    assert in_rollover_window(at(0, 0))
    assert in_rollover_window(at(0, 30))
    assert not in_rollover_window(at(0, 31))
    assert not in_rollover_window(at(23, 50))


def test_status_for():
    """Pending status follows the tag."""
    assert status_for(ReminderState(at(9, 0), ReminderTag.REGULAR)) == (
        DrinkReminderStatus.REGULAR_PENDING
    )
    assert status_for(ReminderState(at(9, 0), ReminderTag.POSTPONED)) == (
        DrinkReminderStatus.POSTPONED_PENDING
    )
