"""Notification settings provider."""

import logging

import aiosqlite

from waterbugger.db.models import NotificationLevel
from waterbugger.db.repository import Repository
from waterbugger.utils.events import EventHook

logger = logging.getLogger(__name__)


class NotificationSettings:
    """The user's notification level, persisted and observable.

    Events:
        changed()
    """

    def __init__(self, repo: Repository, level: NotificationLevel = NotificationLevel.STANDARD):
        self.repo = repo
        self._level = level
        self.changed = EventHook("notification_level_changed")

    @property
    def level(self) -> NotificationLevel:
        return self._level

    @property
    def enabled(self) -> bool:
        """Whether any reminder may be sent."""
        return self._level != NotificationLevel.DISABLED

    async def load(self) -> None:
        """Load the stored level, defaulting to standard."""
        stored = await self.repo.load_notification_level()

        try:
            self._level = NotificationLevel(stored)
        except ValueError:
            if stored is not None:
                logger.warning(f"Unknown notification level {stored!r}, using standard")
            self._level = NotificationLevel.STANDARD

    async def set_level(self, level: NotificationLevel) -> None:
        """Change the level; no-op when it is unchanged."""
        if level == self._level:
            return

        self._level = level
        try:
            await self.repo.save_notification_level(level.value)
        except aiosqlite.Error as e:
            logger.error(f"Failed to save notification level: {e}")

        logger.info(f"Notification level set to {level.value}")
        await self.changed.emit()
