"""Notification dispatcher - schedules reminders on the bot's job queue."""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Protocol

from telegram.error import TelegramError
from telegram.ext import ContextTypes, JobQueue

from waterbugger.bot.formatters import format_reminder_message
from waterbugger.bot.keyboards import reminder_keyboard
from waterbugger.db.models import ReminderContent, ReminderTag, ScheduledEntry

logger = logging.getLogger(__name__)


class DispatchError(Exception):
    """The dispatcher could not register a reminder."""


class NotificationDispatcher(Protocol):
    """Where the engine sends its scheduling decisions."""

    def schedule(
        self,
        group: str,
        tag: ReminderTag | None,
        when: datetime,
        expiry: datetime,
        content: ReminderContent,
    ) -> ScheduledEntry:
        ...

    def cancel_group(self, group: str) -> None:
        ...

    def list_scheduled(self, group: str) -> List[ScheduledEntry]:
        ...


async def deliver_reminder(context: ContextTypes.DEFAULT_TYPE) -> None:
    """Job callback that sends a scheduled reminder."""
    job = context.job
    entry: ScheduledEntry = job.data  # type: ignore

    now = datetime.now(timezone.utc)
    if now > entry.expiry:
        logger.info(f"Skipping expired {entry.group} reminder {entry.id}")
        return

    try:
        await context.bot.send_message(
            chat_id=job.chat_id,  # type: ignore
            text=format_reminder_message(entry.content),
            parse_mode="HTML",
            reply_markup=reminder_keyboard(entry.content.buttons),
        )
        logger.info(f"Delivered {entry.group} reminder {entry.id}")

    except TelegramError as e:
        # The watchdog reschedules on its next tick
        logger.error(f"Failed to deliver {entry.group} reminder {entry.id}: {e}")


class JobQueueDispatcher:
    """Dispatcher backed by python-telegram-bot's JobQueue.

    Each reminder is a one-shot job named after its group. A reminder
    counts as scheduled until its job runs or is removed.
    """

    def __init__(self, job_queue: JobQueue | None, chat_id: int):
        self.job_queue = job_queue
        self.chat_id = chat_id

    def schedule(
        self,
        group: str,
        tag: ReminderTag | None,
        when: datetime,
        expiry: datetime,
        content: ReminderContent,
    ) -> ScheduledEntry:
        if self.job_queue is None:
            raise DispatchError("Job queue is not available")

        entry = ScheduledEntry(
            id=uuid.uuid4().hex,
            group=group,
            tag=tag,
            when=when.astimezone(timezone.utc),
            expiry=expiry.astimezone(timezone.utc),
            content=content,
        )

        try:
            self.job_queue.run_once(
                deliver_reminder,
                when=entry.when,
                data=entry,
                name=group,
                chat_id=self.chat_id,
            )
        except (ValueError, RuntimeError) as e:
            raise DispatchError(f"Could not schedule {group} reminder: {e}") from e

        return entry

    def cancel_group(self, group: str) -> None:
        if self.job_queue is None:
            return

        for job in self.job_queue.get_jobs_by_name(group):
            job.schedule_removal()

    def list_scheduled(self, group: str) -> List[ScheduledEntry]:
        if self.job_queue is None:
            return []

        return [
            job.data  # type: ignore
            for job in self.job_queue.get_jobs_by_name(group)
            if not job.removed
        ]
