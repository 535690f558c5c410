"""Database repository - key/value storage for the water record and settings."""

import logging
from pathlib import Path

import aiosqlite

from waterbugger.utils.constants import NOTIFICATION_LEVEL_KEY, WATER_RECORD_KEY

logger = logging.getLogger(__name__)


class Repository:
    """Database access layer."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open database connection."""
        self._db = await aiosqlite.connect(self.db_path)
        self._db.row_factory = aiosqlite.Row
        logger.info(f"Connected to database at {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        if self._db:
            await self._db.close()
            self._db = None
            logger.info("Database connection closed")

    @property
    def db(self) -> aiosqlite.Connection:
        """Get the database connection."""
        if self._db is None:
            raise RuntimeError("Database not connected")
        return self._db

    # Raw key/value operations

    async def get_value(self, key: str) -> str | None:
        """Get a stored value, or None if the key is absent."""
        async with self.db.execute(
            "SELECT value FROM settings WHERE key = ?", (key,)
        ) as cursor:
            row = await cursor.fetchone()
            if row:
                return row["value"]
            return None

    async def set_value(self, key: str, value: str) -> None:
        """Insert or replace a stored value."""
        await self.db.execute(
            """
            INSERT INTO settings (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = datetime('now')
            """,
            (key, value),
        )
        await self.db.commit()

    # Water record

    async def load_water_record(self) -> str | None:
        """Get the serialized water record."""
        return await self.get_value(WATER_RECORD_KEY)

    async def save_water_record(self, record: str) -> None:
        """Store the serialized water record."""
        await self.set_value(WATER_RECORD_KEY, record)

    # Notification level

    async def load_notification_level(self) -> str | None:
        """Get the stored notification level name."""
        return await self.get_value(NOTIFICATION_LEVEL_KEY)

    async def save_notification_level(self, level: str) -> None:
        """Store the notification level name."""
        await self.set_value(NOTIFICATION_LEVEL_KEY, level)
