"""Configuration management from environment variables."""

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Scheduler configuration loaded from environment variables."""

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Engine
    TICK_INTERVAL: float = float(os.getenv("TICK_INTERVAL", "1"))
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

    # Snooze
    DEFAULT_SNOOZE_MINUTES: int = int(os.getenv("DEFAULT_SNOOZE_MINUTES", "15"))

    @classmethod
    def validate(cls) -> None:
        """Validate configuration."""
        if cls.TICK_INTERVAL <= 0:
            raise ValueError("TICK_INTERVAL must be positive")

        if cls.DEFAULT_SNOOZE_MINUTES <= 0:
            raise ValueError("DEFAULT_SNOOZE_MINUTES must be positive")

        try:
            ZoneInfo(cls.TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown TIMEZONE: {cls.TIMEZONE}") from e
