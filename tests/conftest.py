"""Shared test fixtures: a fake clock, an in-memory dispatcher and a real database."""

import itertools
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List
from zoneinfo import ZoneInfo

import pytest

from waterbugger.bot.formatters import TelegramReminderContent
from waterbugger.db.migrations import run_migrations
from waterbugger.db.models import NotificationLevel, ReminderContent, ReminderTag, ScheduledEntry
from waterbugger.db.repository import Repository
from waterbugger.engine.dispatcher import DispatchError
from waterbugger.engine.reminder_engine import ReminderEngine
from waterbugger.tracker.settings import NotificationSettings
from waterbugger.tracker.water import WaterTracker

TZ = ZoneInfo("UTC")


def at(hour: int, minute: int = 0, day: int = 2) -> datetime:
    """A local time on March <day>, 2026."""
    return datetime(2026, 3, day, hour, minute, tzinfo=TZ)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeDispatcher:
    """In-memory dispatcher that records every call."""

    def __init__(self):
        self.entries: Dict[str, List[ScheduledEntry]] = {}
        self.schedule_calls = 0
        self.fail_schedule = False
        self._ids = itertools.count(1)

    def schedule(
        self,
        group: str,
        tag: ReminderTag | None,
        when: datetime,
        expiry: datetime,
        content: ReminderContent,
    ) -> ScheduledEntry:
        self.schedule_calls += 1
        if self.fail_schedule:
            raise DispatchError("host notifier unavailable")

        entry = ScheduledEntry(
            id=str(next(self._ids)), group=group, tag=tag, when=when, expiry=expiry, content=content
        )
        self.entries.setdefault(group, []).append(entry)
        return entry

    def cancel_group(self, group: str) -> None:
        self.entries.pop(group, None)

    def list_scheduled(self, group: str) -> List[ScheduledEntry]:
        return list(self.entries.get(group, []))

    def fire(self, group: str) -> None:
        """Simulate the host delivering (and dropping) a group's entries."""
        self.entries.pop(group, None)


@dataclass
class Harness:
    repo: Repository
    clock: FakeClock
    dispatcher: FakeDispatcher
    settings: NotificationSettings
    tracker: WaterTracker
    engine: ReminderEngine


async def open_repo(db_path) -> Repository:
    """Migrated, connected repository."""
    await run_migrations(db_path)
    repo = Repository(db_path)
    await repo.connect()
    return repo


async def build_harness(
    db_path,
    now: datetime,
    level: NotificationLevel = NotificationLevel.STANDARD,
    **water,
) -> Harness:
    """Wire up tracker, settings and engine the way main.post_init does.

    Keyword arguments override water state fields before the engine starts.
    """
    repo = await open_repo(db_path)
    clock = FakeClock(now)
    dispatcher = FakeDispatcher()
    settings = NotificationSettings(repo, level)
    tracker = WaterTracker(repo, clock)

    for field_name, value in water.items():
        setattr(tracker._state, field_name, value)
    await tracker.save()

    engine = ReminderEngine(tracker, settings, dispatcher, TelegramReminderContent(), clock)
    return Harness(repo, clock, dispatcher, settings, tracker, engine)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "waterbugger.db"
