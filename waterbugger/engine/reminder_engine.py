"""Reminder engine - keeps the drink and sleep reminders in step with the tracker."""

import asyncio
import logging
from datetime import date, datetime
from typing import Callable, Protocol

from waterbugger.db.models import (
    DrinkReminderStatus,
    NotificationLevel,
    ReminderContent,
    ReminderState,
    ReminderTag,
    Trigger,
)
from waterbugger.engine.dispatcher import DispatchError, NotificationDispatcher
from waterbugger.engine.scheduling import (
    catch_up_reminder,
    in_rollover_window,
    initial_reminder,
    is_due,
    is_real_drink,
    postponed_reminder,
    reminder_after_drink,
    reminder_expiry,
    rescheduled_reminder,
    sleep_reminder_window,
    status_for,
)
from waterbugger.tracker.settings import NotificationSettings
from waterbugger.tracker.water import WaterTracker
from waterbugger.utils.constants import DRINK_REMINDER_GROUP, SLEEP_REMINDER_GROUP
from waterbugger.utils.time_utils import local_date

logger = logging.getLogger(__name__)


class UnexpectedTriggerError(RuntimeError):
    """The engine was activated by a source it does not know."""


class ContentFactory(Protocol):
    """Builds what the drink and sleep reminders say."""

    def drink(
        self, tag: ReminderTag, glass_size: int, reminder_delay: int, level: NotificationLevel
    ) -> ReminderContent: ...

    def sleep(self) -> ReminderContent: ...


class ReminderEngine:
    """Decides when the next reminders fire and reconciles the dispatcher.

    Every entry point replaces the whole ReminderState and re-applies it,
    holding one lock across the decision and the dispatcher calls so that
    watchdog ticks and user actions never interleave.
    """

    def __init__(
        self,
        tracker: WaterTracker,
        settings: NotificationSettings,
        dispatcher: NotificationDispatcher,
        content: ContentFactory,
        clock: Callable[[], datetime],
    ):
        self.tracker = tracker
        self.settings = settings
        self.dispatcher = dispatcher
        self.content = content
        self.clock = clock

        self._lock = asyncio.Lock()
        self._status = DrinkReminderStatus.NONE
        self._reminder: ReminderState | None = None
        self._sleep_time: datetime | None = None
        self._rollover_date: date | None = None
        self._resetting_day = False

        tracker.amount_changed.subscribe(self.on_amount_changed)
        tracker.settings_changed.subscribe(self.on_settings_changed)
        settings.changed.subscribe(self.on_notification_level_changed)

    @property
    def status(self) -> DrinkReminderStatus:
        return self._status

    @property
    def reminder(self) -> ReminderState | None:
        """The last decided drink reminder, pending or not."""
        return self._reminder

    @property
    def sleep_time(self) -> datetime | None:
        return self._sleep_time

    # Entry points

    async def initialize(self) -> None:
        """Seed today's schedule at process start."""
        async with self._lock:
            await self._initialize(self.clock())

    async def on_amount_changed(self, delta: int) -> None:
        """Restart the regular cadence after a real drink."""
        # The watchdog holds the lock while it zeroes the amount
        if self._resetting_day:
            return
        if not is_real_drink(delta, self.tracker.glass_size):
            logger.debug(f"Ignoring amount change of {delta:+d} mL")
            return

        async with self._lock:
            now = self.clock()
            self._cancel(DRINK_REMINDER_GROUP)

            if self.settings.enabled and not self.tracker.is_target_reached:
                self._apply(reminder_after_drink(now, self.tracker.reminder_interval))
            else:
                self._clear_drink_reminder()

    async def on_settings_changed(self, reschedule_time: bool) -> None:
        """Re-apply the schedule after a preference or level change."""
        async with self._lock:
            now = self.clock()
            self._cancel(DRINK_REMINDER_GROUP)

            if not self.settings.enabled:
                self._cancel(SLEEP_REMINDER_GROUP)
                self._sleep_time = None
                self._clear_drink_reminder()
                return

            if self.tracker.is_target_reached:
                self._clear_drink_reminder()
                self._schedule_sleep(now)
                return

            previous = self._reminder
            if reschedule_time or previous is None:
                reminder = rescheduled_reminder(now, self.tracker.reminder_interval)
            elif is_due(now, previous):
                # The old time passed while reminders were off
                reminder = catch_up_reminder(now, previous, self.tracker.reminder_delay)
            else:
                reminder = previous

            self._apply(reminder)
            self._schedule_sleep(now)

    async def on_notification_level_changed(self) -> None:
        await self.on_settings_changed(False)

    async def watchdog(self) -> None:
        """Periodic reconciliation; idempotent and safe to call redundantly."""
        async with self._lock:
            now = self.clock()

            if self._rollover_due(now):
                logger.info("New day: resetting water amount and reminders")
                self._resetting_day = True
                try:
                    await self.tracker.set_amount(0)
                finally:
                    self._resetting_day = False
                await self._initialize(now)
                return

            if not self.settings.enabled:
                self._cancel(DRINK_REMINDER_GROUP)
                self._cancel(SLEEP_REMINDER_GROUP)
                self._sleep_time = None
                self._clear_drink_reminder()
                return

            if self.tracker.is_target_reached:
                self._cancel(DRINK_REMINDER_GROUP)
                self._clear_drink_reminder()
            elif self._reminder is None:
                self._apply(initial_reminder(now, self.tracker.reminder_delay))
            elif not is_due(now, self._reminder):
                if not self.dispatcher.list_scheduled(DRINK_REMINDER_GROUP):
                    logger.info("Drink reminder missing from the schedule, restoring it")
                    self._apply(self._reminder)
            else:
                logger.info("Drink reminder time has passed, catching up")
                self._cancel(DRINK_REMINDER_GROUP)
                self._apply(catch_up_reminder(now, self._reminder, self.tracker.reminder_delay))

            if not self.dispatcher.list_scheduled(SLEEP_REMINDER_GROUP):
                self._schedule_sleep(now)

    async def postpone_drink_reminder(self) -> None:
        """The user said "not yet": ask again after the delay."""
        async with self._lock:
            now = self.clock()
            self._cancel(DRINK_REMINDER_GROUP)

            if self.settings.enabled and not self.tracker.is_target_reached:
                self._apply(postponed_reminder(now, self.tracker.reminder_delay))
            else:
                self._clear_drink_reminder()

    async def confirm_drink(self) -> None:
        """The user drank a glass; rescheduling follows from amount_changed."""
        await self.tracker.add_glass()

    async def handle_trigger(self, trigger: Trigger | str) -> None:
        """Route a host activation to its entry point."""
        try:
            trigger = Trigger(trigger)
        except ValueError:
            raise UnexpectedTriggerError(f"Unexpected trigger: {trigger!r}") from None

        if trigger == Trigger.CONFIRM:
            await self.confirm_drink()
        elif trigger == Trigger.POSTPONE:
            await self.postpone_drink_reminder()
        elif trigger == Trigger.WATCHDOG:
            await self.watchdog()
        else:
            raise UnexpectedTriggerError(f"Unexpected trigger: {trigger!r}")

    # Internals (callers hold the lock)

    async def _initialize(self, now: datetime) -> None:
        self._cancel(DRINK_REMINDER_GROUP)
        self._cancel(SLEEP_REMINDER_GROUP)
        self._sleep_time = None
        self._rollover_date = now.date()

        if not self.settings.enabled:
            self._clear_drink_reminder()
            logger.info("Notifications disabled, nothing scheduled")
            return

        if self.tracker.is_target_reached:
            self._clear_drink_reminder()
        else:
            self._apply(initial_reminder(now, self.tracker.reminder_delay))

        self._schedule_sleep(now)

    def _rollover_due(self, now: datetime) -> bool:
        if self._rollover_date is not None and self._rollover_date >= now.date():
            return False
        if in_rollover_window(now):
            return True
        # Missed the window (host asleep): roll over only if nothing was recorded today
        return local_date(self.tracker.timestamp, now) < now.date()

    def _apply(self, reminder: ReminderState) -> None:
        self._reminder = reminder
        self._status = status_for(reminder)

        content = self.content.drink(
            reminder.tag,
            self.tracker.glass_size,
            self.tracker.reminder_delay,
            self.settings.level,
        )
        expiry = reminder_expiry(
            reminder, self.tracker.reminder_interval, self.tracker.reminder_delay
        )

        try:
            self.dispatcher.schedule(
                DRINK_REMINDER_GROUP, reminder.tag, reminder.next_reminder_time, expiry, content
            )
            logger.info(
                f"{reminder.tag.value} drink reminder scheduled for "
                f"{reminder.next_reminder_time.isoformat()}"
            )
        except DispatchError as e:
            logger.error(f"Failed to schedule drink reminder: {e}")

    def _clear_drink_reminder(self) -> None:
        self._status = DrinkReminderStatus.NONE

    def _schedule_sleep(self, now: datetime) -> None:
        self._cancel(SLEEP_REMINDER_GROUP)
        when, expiry = sleep_reminder_window(now)
        self._sleep_time = when

        try:
            self.dispatcher.schedule(
                SLEEP_REMINDER_GROUP, None, when, expiry, self.content.sleep()
            )
        except DispatchError as e:
            logger.error(f"Failed to schedule sleep reminder: {e}")

    def _cancel(self, group: str) -> None:
        try:
            self.dispatcher.cancel_group(group)
        except DispatchError as e:
            logger.error(f"Failed to cancel {group} reminders: {e}")
