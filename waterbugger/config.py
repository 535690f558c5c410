"""Configuration management from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Telegram
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_CHAT_ID: str = os.getenv("TELEGRAM_CHAT_ID", "")

    # Database
    DATABASE_PATH: Path = Path(os.getenv("DATABASE_PATH", "./data/waterbugger.db"))

    # Local timezone used for the 8:00 floor and midnight rollover
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Engine
    WATCHDOG_INTERVAL: int = int(os.getenv("WATCHDOG_INTERVAL", "900"))

    @classmethod
    def chat_id(cls) -> int:
        """The owner's chat ID as an integer."""
        return int(cls.TELEGRAM_CHAT_ID)

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        if not cls.TELEGRAM_BOT_TOKEN:
            raise ValueError("TELEGRAM_BOT_TOKEN environment variable is required")

        if not cls.TELEGRAM_CHAT_ID:
            raise ValueError("TELEGRAM_CHAT_ID environment variable is required")

        try:
            cls.chat_id()
        except ValueError:
            raise ValueError("TELEGRAM_CHAT_ID must be a numeric chat ID") from None

        # At least one tick must land inside the 30 minute rollover window
        if not 0 < cls.WATCHDOG_INTERVAL <= 1800:
            raise ValueError("WATCHDOG_INTERVAL must be between 1 and 1800 seconds")

        # Ensure database directory exists
        cls.DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)
