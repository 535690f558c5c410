"""Data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class NotificationLevel(str, Enum):
    """Which kind of reminders, if any, the bot may send."""

    DISABLED = "disabled"
    STANDARD = "standard"
    ALARM = "alarm"


class ReminderTag(str, Enum):
    """Whether the pending drink reminder follows the regular cadence or a postponement."""

    REGULAR = "Regular"
    POSTPONED = "Postponed"


class DrinkReminderStatus(str, Enum):
    """Engine view of the drink reminder schedule."""

    NONE = "NoDrinkReminder"
    REGULAR_PENDING = "RegularPending"
    POSTPONED_PENDING = "PostponedPending"


class Trigger(str, Enum):
    """Host activations routed into the engine."""

    CONFIRM = "confirm"
    POSTPONE = "postpone"
    WATCHDOG = "watchdog"


@dataclass
class WaterState:
    """Today's water intake and the reminder preferences."""

    amount: int  # mL consumed today
    target: int  # mL
    glass_size: int  # mL
    reminder_interval: int  # minutes between regular reminders
    reminder_delay: int  # minutes for postponement and catch-up
    timestamp: datetime  # UTC, last mutation


@dataclass(frozen=True)
class ReminderState:
    """The next drink reminder decided by the engine."""

    next_reminder_time: datetime
    tag: ReminderTag


@dataclass
class ReminderContent:
    """What a delivered reminder says."""

    title: str
    body: str
    buttons: list[tuple[str, str]] = field(default_factory=list)  # (label, callback data)
    alarm: bool = False


@dataclass
class ScheduledEntry:
    """A reminder registered with the dispatcher."""

    group: str
    when: datetime
    expiry: datetime
    content: ReminderContent
    tag: ReminderTag | None = None
    id: str = field(default="")
