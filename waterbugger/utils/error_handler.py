"""Global error handler for the bot."""

import logging
import traceback

from telegram import Update
from telegram.ext import ContextTypes

from waterbugger.engine.reminder_engine import UnexpectedTriggerError
from waterbugger.tracker.water import ValidationError

logger = logging.getLogger(__name__)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle errors in the bot."""
    logger.error("Exception while handling an update:", exc_info=context.error)

    tb_list = traceback.format_exception(None, context.error, context.error.__traceback__)
    tb_string = "".join(tb_list)
    logger.error(f"Traceback:\n{tb_string}")

    # Try to notify the user
    if isinstance(update, Update) and update.effective_message:
        try:
            error = context.error
            error_message = (
                "😅 Oops! Something went wrong.\n\n"
                "The error has been logged. Please try again or use /help for assistance."
            )

            if isinstance(error, ValidationError):
                error_message = f"❌ {error}"
            elif isinstance(error, UnexpectedTriggerError):
                error_message = "❌ That button is no longer supported."
            elif "Timeout" in str(error):
                error_message = (
                    "⏱️ Request timed out.\n\n"
                    "Please try again in a moment."
                )
            elif "Network" in str(error):
                error_message = (
                    "🌐 Network error.\n\n"
                    "Please check your connection and try again."
                )

            await update.effective_message.reply_text(error_message)

        except Exception as e:
            logger.error(f"Failed to send error message to user: {e}")
