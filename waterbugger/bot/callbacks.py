"""Callback query handlers for reminder buttons."""

import logging

from telegram import Update
from telegram.ext import ContextTypes

from waterbugger.db.models import Trigger
from waterbugger.engine.reminder_engine import ReminderEngine, UnexpectedTriggerError
from waterbugger.tracker.water import WaterTracker

logger = logging.getLogger(__name__)


async def handle_confirm_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle 'Yes' button press."""
    if not update.callback_query:
        return

    engine: ReminderEngine = context.bot_data["engine"]
    tracker: WaterTracker = context.bot_data["tracker"]

    await engine.handle_trigger(Trigger.CONFIRM)

    if update.callback_query.message:
        await update.callback_query.message.edit_text(
            f"💧 <b>Nice!</b> +{tracker.glass_size} mL\n\n"
            f"Today: {tracker.amount} / {tracker.target} mL",
            parse_mode="HTML",
        )

    await update.callback_query.answer(f"✓ +{tracker.glass_size} mL")


async def handle_postpone_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle 'Not yet' button press."""
    if not update.callback_query:
        return

    engine: ReminderEngine = context.bot_data["engine"]
    tracker: WaterTracker = context.bot_data["tracker"]

    await engine.handle_trigger(Trigger.POSTPONE)

    if update.callback_query.message:
        await update.callback_query.message.edit_text(
            f"⏸ <b>Postponed</b>\n\nI'll ask again in {tracker.reminder_delay} minutes.",
            parse_mode="HTML",
        )

    await update.callback_query.answer("⏸ Postponed")


async def callback_router(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Route callback queries to appropriate handlers."""
    if not update.callback_query:
        return

    data = update.callback_query.data
    if not data:
        return

    chat = update.effective_chat
    if chat and chat.id != context.bot_data["chat_id"]:
        await update.callback_query.answer("These reminders aren't yours.")
        return

    parts = data.split(":")

    if parts[0] != "drink" or len(parts) != 2:
        await update.callback_query.answer("Unknown action")
        return

    if parts[1] == Trigger.CONFIRM.value:
        await handle_confirm_callback(update, context)
    elif parts[1] == Trigger.POSTPONE.value:
        await handle_postpone_callback(update, context)
    else:
        raise UnexpectedTriggerError(f"Unexpected button action: {data!r}")
