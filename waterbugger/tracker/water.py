"""Water intake tracker - today's amount and the reminder preferences."""

import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable

import aiosqlite
from dateutil.parser import isoparse

from waterbugger.db.models import WaterState
from waterbugger.db.repository import Repository
from waterbugger.utils.constants import (
    DEFAULT_GLASS_SIZE,
    DEFAULT_REMINDER_DELAY,
    DEFAULT_REMINDER_INTERVAL,
    DEFAULT_WATER_AMOUNT,
    DEFAULT_WATER_TARGET,
    GLASS_SIZE_RANGE,
    REMINDER_DELAY_RANGE,
    REMINDER_INTERVAL_RANGE,
    TARGET_RANGE,
    ValueRange,
)
from waterbugger.utils.events import EventHook
from waterbugger.utils.time_utils import local_date

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """A setting was given a value outside its accepted range."""


def default_state(now: datetime) -> WaterState:
    """Water state with every field at its default."""
    return WaterState(
        amount=DEFAULT_WATER_AMOUNT,
        target=DEFAULT_WATER_TARGET,
        glass_size=DEFAULT_GLASS_SIZE,
        reminder_interval=DEFAULT_REMINDER_INTERVAL,
        reminder_delay=DEFAULT_REMINDER_DELAY,
        timestamp=now.astimezone(timezone.utc),
    )


def serialize_state(state: WaterState) -> str:
    """Serialize the water state into its stored record."""
    return json.dumps(
        {
            "ReminderInterval": state.reminder_interval,
            "ReminderDelay": state.reminder_delay,
            "GlassSize": state.glass_size,
            "Target": state.target,
            "Amount": state.amount,
            "Timestamp": state.timestamp.isoformat(),
        }
    )


def _read_int(payload: dict, key: str, value_range: ValueRange | None = None) -> int:
    value = payload[key]
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{key} must be an integer, got {value!r}")
    if value_range is not None and value not in value_range:
        raise ValueError(value_range.describe())
    return value


def parse_state(raw: str) -> WaterState:
    """Parse a stored record.

    Raises:
        ValueError, TypeError or KeyError if any field is missing or corrupt.
    """
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise TypeError("Water record must be a JSON object")

    timestamp = isoparse(payload["Timestamp"])
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)

    amount = _read_int(payload, "Amount")
    if amount < 0:
        raise ValueError(f"Amount cannot be negative, got {amount}")

    return WaterState(
        amount=amount,
        target=_read_int(payload, "Target", TARGET_RANGE),
        glass_size=_read_int(payload, "GlassSize", GLASS_SIZE_RANGE),
        reminder_interval=_read_int(payload, "ReminderInterval", REMINDER_INTERVAL_RANGE),
        reminder_delay=_read_int(payload, "ReminderDelay", REMINDER_DELAY_RANGE),
        timestamp=timestamp.astimezone(timezone.utc),
    )


class WaterTracker:
    """Holds today's intake and announces changes to it.

    Every mutation is persisted before its event is emitted, so listeners
    always observe the stored value.

    Events:
        amount_changed(delta: int)
        settings_changed(reschedule_time: bool)
    """

    def __init__(self, repo: Repository, clock: Callable[[], datetime]):
        self.repo = repo
        self.clock = clock
        self.amount_changed = EventHook("amount_changed")
        self.settings_changed = EventHook("settings_changed")
        self._state = default_state(clock())

    @property
    def state(self) -> WaterState:
        """A copy of the current water state."""
        return replace(self._state)

    @property
    def amount(self) -> int:
        return self._state.amount

    @property
    def target(self) -> int:
        return self._state.target

    @property
    def glass_size(self) -> int:
        return self._state.glass_size

    @property
    def reminder_interval(self) -> int:
        return self._state.reminder_interval

    @property
    def reminder_delay(self) -> int:
        return self._state.reminder_delay

    @property
    def timestamp(self) -> datetime:
        return self._state.timestamp

    @property
    def is_target_reached(self) -> bool:
        return self._state.amount >= self._state.target

    # Amount

    async def set_amount(self, value: int) -> None:
        """Replace today's amount and emit the delta.

        No bounds check: corrective writes may lower the amount.
        """
        delta = value - self._state.amount
        self._state.amount = value
        await self.save()

        logger.info(f"Water amount set to {value} mL (delta {delta:+d})")
        await self.amount_changed.emit(delta)

    async def add(self, ml: int) -> None:
        """Register a drink of the given size."""
        await self.set_amount(self._state.amount + ml)

    async def add_glass(self) -> None:
        """Register one glass."""
        await self.add(self._state.glass_size)

    # Settings

    async def set_target(self, value: int) -> None:
        await self._set_setting("target", value, TARGET_RANGE, reschedule_time=False)

    async def set_glass_size(self, value: int) -> None:
        await self._set_setting("glass_size", value, GLASS_SIZE_RANGE, reschedule_time=False)

    async def set_reminder_interval(self, value: int) -> None:
        await self._set_setting(
            "reminder_interval", value, REMINDER_INTERVAL_RANGE, reschedule_time=True
        )

    async def set_reminder_delay(self, value: int) -> None:
        await self._set_setting(
            "reminder_delay", value, REMINDER_DELAY_RANGE, reschedule_time=True
        )

    async def _set_setting(
        self, field_name: str, value: int, value_range: ValueRange, reschedule_time: bool
    ) -> None:
        if value not in value_range:
            raise ValidationError(value_range.describe())

        setattr(self._state, field_name, value)
        await self.save()

        logger.info(f"{value_range.name} set to {value} {value_range.unit}")
        await self.settings_changed.emit(reschedule_time)

    # Persistence

    async def load(self) -> None:
        """Load the stored record, falling back to defaults if it is unusable.

        A record from a previous day starts today over at zero. Listeners
        receive one amount_changed and one settings_changed afterwards.
        """
        now = self.clock()
        raw = await self.repo.load_water_record()

        try:
            if raw is None:
                raise KeyError("no stored water record")
            self._state = parse_state(raw)

            if local_date(self._state.timestamp, now) < now.date():
                logger.info("Stored water record is from a previous day, resetting amount")
                self._state.amount = DEFAULT_WATER_AMOUNT
                await self.save()

        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Water record unavailable ({e}), loading defaults")
            self._state = default_state(now)
            await self.save()

        await self.amount_changed.emit(self._state.amount)
        await self.settings_changed.emit(True)

    async def save(self) -> None:
        """Write the current state with a fresh timestamp."""
        self._state.timestamp = self.clock().astimezone(timezone.utc)

        try:
            await self.repo.save_water_record(serialize_state(self._state))
        except aiosqlite.Error as e:
            logger.error(f"Failed to save water record: {e}")
