"""Command handlers."""

import logging

from telegram import Update
from telegram.ext import ContextTypes

from waterbugger.bot.formatters import (
    format_help_message,
    format_status,
    format_welcome_message,
)
from waterbugger.db.models import NotificationLevel
from waterbugger.engine.reminder_engine import ReminderEngine
from waterbugger.tracker.settings import NotificationSettings
from waterbugger.tracker.water import ValidationError, WaterTracker

logger = logging.getLogger(__name__)


def _parse_int_arg(context: ContextTypes.DEFAULT_TYPE) -> int | None:
    """The single integer argument of a command, or None."""
    if not context.args or len(context.args) != 1:
        return None
    try:
        return int(context.args[0])
    except ValueError:
        return None


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command."""
    if not update.message:
        return

    await update.message.reply_html(format_welcome_message())


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command."""
    if not update.message:
        return

    await update.message.reply_html(format_help_message())


async def status_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /status command - today's progress and the next reminder."""
    if not update.message:
        return

    tracker: WaterTracker = context.bot_data["tracker"]
    settings: NotificationSettings = context.bot_data["settings"]
    engine: ReminderEngine = context.bot_data["engine"]

    message = format_status(
        tracker.state,
        settings.level,
        engine.status,
        engine.reminder,
        engine.sleep_time,
        tracker.clock(),
    )
    await update.message.reply_html(message)


async def drink_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /drink [ml] command."""
    if not update.message:
        return

    tracker: WaterTracker = context.bot_data["tracker"]

    if context.args:
        ml = _parse_int_arg(context)
        if ml is None or ml <= 0:
            await update.message.reply_text("Usage: /drink [ml] (a positive number)")
            return
        await tracker.add(ml)
    else:
        ml = tracker.glass_size
        await tracker.add_glass()

    await update.message.reply_html(
        f"💧 +{ml} mL registered. Today: <b>{tracker.amount} / {tracker.target} mL</b>"
    )


async def set_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /set <ml> command - correct today's total."""
    if not update.message:
        return

    amount = _parse_int_arg(context)
    if amount is None or amount < 0:
        await update.message.reply_text("Usage: /set <ml> (zero or more)")
        return

    tracker: WaterTracker = context.bot_data["tracker"]
    await tracker.set_amount(amount)

    await update.message.reply_html(f"✓ Today's total set to <b>{amount} mL</b>")


async def postpone_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /postpone command."""
    if not update.message:
        return

    engine: ReminderEngine = context.bot_data["engine"]
    tracker: WaterTracker = context.bot_data["tracker"]
    await engine.postpone_drink_reminder()

    await update.message.reply_text(
        f"⏸ Okay, I'll ask again in {tracker.reminder_delay} minutes."
    )


async def _update_setting(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    usage: str,
    setter_name: str,
    confirmation: str,
) -> None:
    """Shared body of the numeric setting commands."""
    if not update.message:
        return

    value = _parse_int_arg(context)
    if value is None:
        await update.message.reply_text(usage)
        return

    tracker: WaterTracker = context.bot_data["tracker"]

    try:
        await getattr(tracker, setter_name)(value)
    except ValidationError as e:
        await update.message.reply_text(f"❌ {e}")
        return

    await update.message.reply_html(confirmation.format(value=value))


async def target_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /target <ml> command."""
    await _update_setting(
        update, context, "Usage: /target <ml>", "set_target",
        "🎯 Daily target set to <b>{value} mL</b>",
    )


async def glass_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /glass <ml> command."""
    await _update_setting(
        update, context, "Usage: /glass <ml>", "set_glass_size",
        "🥛 Glass size set to <b>{value} mL</b>",
    )


async def interval_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /interval <minutes> command."""
    await _update_setting(
        update, context, "Usage: /interval <minutes>", "set_reminder_interval",
        "🔁 Reminding you every <b>{value} minutes</b>",
    )


async def delay_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /delay <minutes> command."""
    await _update_setting(
        update, context, "Usage: /delay <minutes>", "set_reminder_delay",
        "⏸ Postponing by <b>{value} minutes</b>",
    )


async def notify_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /notify <disabled|standard|alarm> command."""
    if not update.message:
        return

    settings: NotificationSettings = context.bot_data["settings"]
    valid_levels = [level.value for level in NotificationLevel]

    # If no level provided, show current
    if not context.args:
        await update.message.reply_html(
            f"<b>Current notification level:</b> {settings.level.value}\n\n"
            f"To change: <code>/notify {'|'.join(valid_levels)}</code>"
        )
        return

    try:
        level = NotificationLevel(context.args[0].lower())
    except ValueError:
        await update.message.reply_text(
            f"Invalid level. Choose one of: {', '.join(valid_levels)}"
        )
        return

    await settings.set_level(level)

    await update.message.reply_html(f"🔔 Notification level set to <b>{level.value}</b>")
