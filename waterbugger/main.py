"""Main entry point for WaterBugger bot."""

import logging
import sys
from functools import partial

from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    filters,
)

from waterbugger.bot.callbacks import callback_router
from waterbugger.bot.formatters import TelegramReminderContent
from waterbugger.bot.handlers import (
    delay_command,
    drink_command,
    glass_command,
    help_command,
    interval_command,
    notify_command,
    postpone_command,
    set_command,
    start_command,
    status_command,
    target_command,
)
from waterbugger.config import Config
from waterbugger.db.migrations import run_migrations
from waterbugger.db.models import Trigger
from waterbugger.db.repository import Repository
from waterbugger.engine.dispatcher import JobQueueDispatcher
from waterbugger.engine.reminder_engine import ReminderEngine
from waterbugger.tracker.settings import NotificationSettings
from waterbugger.tracker.water import WaterTracker
from waterbugger.utils.error_handler import error_handler
from waterbugger.utils.time_utils import local_now

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, Config.LOG_LEVEL),
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)


async def watchdog_job(context: "ContextTypes.DEFAULT_TYPE") -> None:
    """Job callback for the reminder watchdog."""
    engine: ReminderEngine = context.bot_data["engine"]
    await engine.handle_trigger(Trigger.WATCHDOG)


async def post_init(application: Application) -> None:
    """Load state and seed the reminder schedule after the application is created."""
    await run_migrations(Config.DATABASE_PATH)

    repo = Repository(Config.DATABASE_PATH)
    await repo.connect()

    clock = partial(local_now, Config.TIMEZONE)
    settings = NotificationSettings(repo)
    tracker = WaterTracker(repo, clock)
    dispatcher = JobQueueDispatcher(application.job_queue, Config.chat_id())
    engine = ReminderEngine(tracker, settings, dispatcher, TelegramReminderContent(), clock)

    application.bot_data.update(
        repo=repo,
        settings=settings,
        tracker=tracker,
        engine=engine,
        chat_id=Config.chat_id(),
    )

    await settings.load()
    await tracker.load()
    await engine.initialize()

    job_queue = application.job_queue
    if job_queue:
        job_queue.run_repeating(
            watchdog_job,
            interval=Config.WATCHDOG_INTERVAL,
            first=Config.WATCHDOG_INTERVAL,
            name="watchdog",
        )
        logger.info(f"Watchdog job scheduled (interval: {Config.WATCHDOG_INTERVAL}s)")
    else:
        logger.warning("No job queue available; install python-telegram-bot[job-queue]")

    logger.info("WaterBugger initialized successfully")


async def post_shutdown(application: Application) -> None:
    """Cleanup resources on shutdown."""
    repo: Repository = application.bot_data.get("repo")
    if repo:
        await repo.close()

    logger.info("WaterBugger shut down")


def main() -> None:
    """Start the bot."""
    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    application = (
        Application.builder()
        .token(Config.TELEGRAM_BOT_TOKEN)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    # Only the owner may talk to the bot
    owner = filters.Chat(chat_id=Config.chat_id())

    application.add_handler(CommandHandler("start", start_command, filters=owner))
    application.add_handler(CommandHandler("help", help_command, filters=owner))
    application.add_handler(CommandHandler("status", status_command, filters=owner))
    application.add_handler(CommandHandler("drink", drink_command, filters=owner))
    application.add_handler(CommandHandler("set", set_command, filters=owner))
    application.add_handler(CommandHandler("postpone", postpone_command, filters=owner))

    # Settings commands
    application.add_handler(CommandHandler("target", target_command, filters=owner))
    application.add_handler(CommandHandler("glass", glass_command, filters=owner))
    application.add_handler(CommandHandler("interval", interval_command, filters=owner))
    application.add_handler(CommandHandler("delay", delay_command, filters=owner))
    application.add_handler(CommandHandler("notify", notify_command, filters=owner))

    # Callback queries (reminder buttons)
    application.add_handler(CallbackQueryHandler(callback_router))

    application.add_error_handler(error_handler)

    logger.info("Starting WaterBugger bot...")
    application.run_polling(allowed_updates=["message", "callback_query"])


if __name__ == "__main__":
    main()
