"""Tests for the notification settings provider."""

import asyncio

from conftest import open_repo
from waterbugger.db.models import NotificationLevel
from waterbugger.tracker.settings import NotificationSettings


def test_load_defaults_to_standard(db_path):
    """Without a stored level, notifications are on."""

    async def scenario():
        repo = await open_repo(db_path)
        settings = NotificationSettings(repo)
        await settings.load()

        assert settings.level == NotificationLevel.STANDARD
        assert settings.enabled
        await repo.close()

    asyncio.run(scenario())


def test_load_unknown_level_falls_back(db_path):
    """A garbled stored level falls back to standard."""

    async def scenario():
        repo = await open_repo(db_path)
        await repo.save_notification_level("loud")
        settings = NotificationSettings(repo, NotificationLevel.ALARM)
        await settings.load()

        assert settings.level == NotificationLevel.STANDARD
        await repo.close()

    asyncio.run(scenario())


def test_set_level_persists_and_notifies(db_path):
    """A new level is stored and announced once."""

    async def scenario():
        repo = await open_repo(db_path)
        settings = NotificationSettings(repo)
        calls = []

        async def listener():
            calls.append(settings.level)

        settings.changed.subscribe(listener)
        await settings.set_level(NotificationLevel.DISABLED)

        assert calls == [NotificationLevel.DISABLED]
        assert not settings.enabled

        reloaded = NotificationSettings(repo)
        await reloaded.load()
        assert reloaded.level == NotificationLevel.DISABLED
        await repo.close()

    asyncio.run(scenario())


def test_set_same_level_is_silent(db_path):
    """Setting the current level again does nothing."""

    async def scenario():
        repo = await open_repo(db_path)
        settings = NotificationSettings(repo, NotificationLevel.ALARM)
        calls = []

        async def listener():
            calls.append(True)

        settings.changed.subscribe(listener)
        await settings.set_level(NotificationLevel.ALARM)

        assert calls == []
        assert await repo.load_notification_level() is None
        await repo.close()

    asyncio.run(scenario())
