"""Constants and default values."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ValueRange:
    """Inclusive range accepted by a tracker setting."""

    name: str
    minimum: int
    maximum: int
    unit: str

    def __contains__(self, value: int) -> bool:
        return self.minimum <= value <= self.maximum

    def describe(self) -> str:
        return f"Valid {self.name} values range from {self.minimum} to {self.maximum} {self.unit}"


# Default water settings (seeded when the stored record is missing or corrupt)
DEFAULT_REMINDER_INTERVAL = 30  # minutes
DEFAULT_REMINDER_DELAY = 5  # minutes
DEFAULT_GLASS_SIZE = 250  # mL
DEFAULT_WATER_AMOUNT = 0  # mL
DEFAULT_WATER_TARGET = 2000  # mL

# Accepted ranges
TARGET_RANGE = ValueRange("Target", 1, 10000, "mL")
GLASS_SIZE_RANGE = ValueRange("GlassSize", 1, 2000, "mL")
REMINDER_INTERVAL_RANGE = ValueRange("ReminderInterval", 1, 1440, "minutes")
REMINDER_DELAY_RANGE = ValueRange("ReminderDelay", 1, 720, "minutes")

# Dispatcher groups
DRINK_REMINDER_GROUP = "DrinkReminder"
SLEEP_REMINDER_GROUP = "SleepReminder"

# Scheduling
DAY_START_HOUR = 8  # Drink reminders never fire before 8:00 local time
ROLLOVER_WINDOW_MINUTES = 30  # Watchdog resets the day within this window after midnight
SLEEP_REMINDER_EXPIRY_HOURS = 8
CATCH_UP_MIN_SECONDS = 1

# Storage keys
WATER_RECORD_KEY = "water"
NOTIFICATION_LEVEL_KEY = "notification_level"

# Callback data for reminder buttons
CONFIRM_CALLBACK = "drink:confirm"
POSTPONE_CALLBACK = "drink:postpone"
