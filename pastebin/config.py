"""
Configuration module for Pastebin.
Loads environment variables and provides config objects.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "redis").lower()
        self.REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
        self.DEBUG: bool = _flag("DEBUG", "False")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.APP_DOMAIN: str = os.getenv("APP_DOMAIN", "http://localhost:8000")

        # Paste lifecycle
        self.SLUG_LENGTH: int = int(os.getenv("SLUG_LENGTH", "10"))
        self.SLUG_MAX_ATTEMPTS: int = int(os.getenv("SLUG_MAX_ATTEMPTS", "5"))
        self.REAP_INTERVAL_SECONDS: float = float(os.getenv("REAP_INTERVAL_SECONDS", "1"))
        self.DEFAULT_TTL_SECONDS: int = int(os.getenv("DEFAULT_TTL_SECONDS", "86400"))


settings = Settings()
