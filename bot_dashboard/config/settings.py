# bot_dashboard/config/settings.py
import os
import logging
from dotenv import load_dotenv
from typing import List, Optional

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("sqlite", "json")


def parse_admin_user_ids(raw: Optional[str]) -> List[int]:
    """Parse a comma-separated list of Telegram user IDs, ignoring it entirely if malformed."""
    if not raw:
        return []
    try:
        return [int(id_str.strip()) for id_str in raw.split(',') if id_str.strip()]
    except ValueError:
        logger.error("Invalid ADMIN_USER_IDS format. Should be comma-separated integers.")
        return []


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # Storage
        self.STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "sqlite").lower()
        self.DATABASE_PATH: str = os.getenv("DATABASE_PATH", "bot_dashboard.db")
        self.DATA_FILE: str = os.getenv("DATA_FILE", "data.json")

        # HTTP API
        self.HTTP_HOST: str = os.getenv("HTTP_HOST", "0.0.0.0")
        self.HTTP_PORT: int = int(os.getenv("HTTP_PORT", "8000"))
        self.API_KEY: Optional[str] = os.getenv("DASHBOARD_API_KEY") or None

        # Telegram dashboard bot, disabled when no token is set
        self.DASHBOARD_BOT_TOKEN: Optional[str] = os.getenv("DASHBOARD_BOT_TOKEN") or None
        self.ADMIN_USER_IDS: List[int] = parse_admin_user_ids(os.getenv("ADMIN_USER_IDS"))

        # Logging level
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        if self.STORAGE_BACKEND not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}. Got: '{self.STORAGE_BACKEND}'")
        if self.DASHBOARD_BOT_TOKEN and not self.ADMIN_USER_IDS:
            logger.warning("ADMIN_USER_IDS environment variable is not set or is invalid. Bot commands will be denied.")

    def log_summary(self) -> None:
        logger.info("Settings loaded.")
        logger.info(f"Storage Backend: {self.STORAGE_BACKEND}")
        logger.info(f"Database Path: {self.DATABASE_PATH}")
        logger.info(f"Data File: {self.DATA_FILE}")
        logger.info(f"Telegram Bot Enabled: {bool(self.DASHBOARD_BOT_TOKEN)}")
        logger.info(f"Log Level: {self.LOG_LEVEL}")


# Single instance of settings to be imported by other modules
settings = Settings()
