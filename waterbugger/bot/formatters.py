"""Message text and reminder content formatters."""

from datetime import datetime

from waterbugger.bot.keyboards import drink_reminder_buttons
from waterbugger.db.models import (
    DrinkReminderStatus,
    NotificationLevel,
    ReminderContent,
    ReminderState,
    ReminderTag,
    WaterState,
)
from waterbugger.utils.time_utils import format_clock, format_relative_time


def drink_reminder_content(
    tag: ReminderTag, glass_size: int, reminder_delay: int, level: NotificationLevel
) -> ReminderContent:
    """Build the drink reminder shown to the user."""
    if tag == ReminderTag.POSTPONED:
        body = "You should have been drinking a glass of water! Have you finished it already?"
    else:
        body = "Psst... hey you! What about drinking a nice glass of fresh water?"

    return ReminderContent(
        title="Drink Reminder",
        body=body,
        buttons=drink_reminder_buttons(glass_size, reminder_delay),
        alarm=level == NotificationLevel.ALARM,
    )


def sleep_reminder_content() -> ReminderContent:
    """Build the midnight sleep reminder."""
    return ReminderContent(
        title="Sleep Reminder",
        body="It's pretty late, you should be going to sleep now. Goodnight ;)",
    )


class TelegramReminderContent:
    """Content factory handed to the engine: Telegram text plus inline buttons."""

    def drink(
        self, tag: ReminderTag, glass_size: int, reminder_delay: int, level: NotificationLevel
    ) -> ReminderContent:
        return drink_reminder_content(tag, glass_size, reminder_delay, level)

    def sleep(self) -> ReminderContent:
        return sleep_reminder_content()


def format_reminder_message(content: ReminderContent) -> str:
    """Render reminder content as an HTML message."""
    emoji = "🚨" if content.alarm else ("💧" if content.buttons else "🌙")
    header = f"{emoji} <b>{content.title.upper() if content.alarm else content.title}</b> {emoji}"
    return f"{header}\n\n{content.body}"


def format_progress_bar(amount: int, target: int, width: int = 10) -> str:
    """Text progress bar, e.g. ▰▰▰▱▱▱▱▱▱▱."""
    filled = min(width, max(0, amount * width // target)) if target > 0 else 0
    return "▰" * filled + "▱" * (width - filled)


def format_status(
    water: WaterState,
    level: NotificationLevel,
    status: DrinkReminderStatus,
    reminder: ReminderState | None,
    sleep_time: datetime | None,
    now: datetime,
) -> str:
    """Format the /status dashboard."""
    percent = water.amount * 100 // water.target if water.target else 0
    lines = [
        "<b>Today's Water</b> 💧\n",
        f"{format_progress_bar(water.amount, water.target)} {percent}%",
        f"{water.amount} / {water.target} mL\n",
        f"🥛 Glass: {water.glass_size} mL",
        f"🔁 Interval: {water.reminder_interval} min",
        f"⏸ Delay: {water.reminder_delay} min",
        f"🔔 Notifications: {level.value}",
    ]

    if status != DrinkReminderStatus.NONE and reminder is not None:
        when = reminder.next_reminder_time
        lines.append(
            f"\n⏰ Next reminder ({reminder.tag.value.lower()}): "
            f"{format_clock(when, now)} ({format_relative_time(when, now)})"
        )
    elif water.amount >= water.target:
        lines.append("\n🎉 Target reached, no more reminders today!")
    else:
        lines.append("\nNo drink reminder scheduled.")

    if sleep_time is not None:
        lines.append(f"🌙 Sleep reminder: {format_clock(sleep_time, now)}")

    return "\n".join(lines)


def format_welcome_message() -> str:
    """Format the welcome message for /start."""
    return """
<b>Welcome to WaterBugger!</b> 💧

I'll nag you to drink water throughout the day and to go to sleep at midnight.

<b>Quick Start:</b>
• Tap <i>Yes</i> on a reminder when you've had a glass
• Tap <i>Not yet</i> and I'll ask again in a few minutes
• /status - See today's progress
• /help - Full command list
""".strip()


def format_help_message() -> str:
    """Format the help message."""
    return """
<b>WaterBugger Commands 💧</b>

<b>Drinking:</b>
/drink [ml] - Register a drink (defaults to one glass)
/set &lt;ml&gt; - Correct today's total
/postpone - Ask me again later
/status - Today's progress and next reminder

<b>Settings:</b>
/target &lt;ml&gt; - Daily target (1-10000)
/glass &lt;ml&gt; - Glass size (1-2000)
/interval &lt;min&gt; - Minutes between reminders (1-1440)
/delay &lt;min&gt; - Minutes to postpone (1-720)
/notify &lt;disabled|standard|alarm&gt; - Notification level

<b>Tips:</b>
• Reminders never start before 8:00
• Small corrections (half a glass or less) don't reset the reminder timer
• Your total resets at midnight
""".strip()
