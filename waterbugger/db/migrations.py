"""Schema setup for the key/value store."""

import logging
from pathlib import Path

import aiosqlite

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"
SCHEMA_VERSION = 1


async def run_migrations(db_path: Path) -> None:
    """Bring the database file up to SCHEMA_VERSION.

    The only table is ``settings``, which holds the water record and the
    notification level as JSON/text values. The version lives in
    ``PRAGMA user_version``; a file already at the current version is left alone.
    """
    async with aiosqlite.connect(db_path) as db:
        async with db.execute("PRAGMA user_version") as cursor:
            row = await cursor.fetchone()
        version = row[0] if row else 0

        if version >= SCHEMA_VERSION:
            logger.debug(f"Database {db_path} already at schema version {version}")
            return

        await db.executescript(SCHEMA_PATH.read_text())
        await db.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
        await db.commit()

    logger.info(f"Database at {db_path} migrated from version {version} to {SCHEMA_VERSION}")
