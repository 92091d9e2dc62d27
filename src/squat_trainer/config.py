"""Configuration settings for the squat trainer."""
import os
from typing import List, Optional


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


class Settings:
    """Application settings."""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    # Web view server
    HOST: str = "127.0.0.1"
    PORT: int = 12002
    CORS_ORIGINS: List[str] = []

    # Timing
    TICK_MS: int = 20
    HOLD_SECONDS: float = 5.0
    REST_COUNTDOWN_SECONDS: int = 3

    def __init__(self):
        self.LOG_LEVEL = os.getenv("SQUAT_LOG_LEVEL", "INFO").upper()
        self.LOG_FILE = os.getenv("SQUAT_LOG_FILE") or None

        self.HOST = os.getenv("SQUAT_HOST", "127.0.0.1")
        self.PORT = _int_env("SQUAT_PORT", 12002)
        origins = os.getenv("SQUAT_CORS_ORIGINS", "")
        self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]

        self.TICK_MS = max(1, _int_env("SQUAT_TICK_MS", 20))
        self.HOLD_SECONDS = _float_env("SQUAT_HOLD_SECONDS", 5.0)
        self.REST_COUNTDOWN_SECONDS = max(0, _int_env("SQUAT_REST_COUNTDOWN_SECONDS", 3))

    @property
    def tick_seconds(self) -> float:
        return self.TICK_MS / 1000.0


settings = Settings()
