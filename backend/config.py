"""Centralized configuration — all env vars in one place."""

import logging
import os
import sys
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

READ_MODES = {"cache", "file"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Upstream hotlist
        self.hotlist_url: str = os.getenv("HOTLIST_URL", "https://suoluosi.net/blockchain/getHotlist")
        self.hotlist_page: int = int(os.getenv("HOTLIST_PAGE", "1"))
        self.hotlist_limit: int = int(os.getenv("HOTLIST_LIMIT", "10"))
        self.hotlist_timeout_seconds: float = float(os.getenv("HOTLIST_TIMEOUT_SECONDS", "10"))

        # Ingestion
        self.poll_interval_seconds: float = float(os.getenv("POLL_INTERVAL_SECONDS", "30"))
        self.scheduler_enabled: bool = _env_bool("SCHEDULER_ENABLED", True)
        self.source_timezone: str | None = os.getenv("SOURCE_TIMEZONE") or None

        # Storage
        self.data_file: str = os.getenv("DATA_FILE", "data.json")
        self.read_mode: str = os.getenv("READ_MODE", "cache").strip().lower()
        self.atomic_writes: bool = _env_bool("ATOMIC_WRITES", False)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cache_enabled(self) -> bool:
        return self.read_mode == "cache"

    def validate(self) -> list[str]:
        """Return list of configuration problems (empty when valid)."""
        problems = []
        if self.read_mode not in READ_MODES:
            problems.append(f"READ_MODE must be one of {sorted(READ_MODES)}, got {self.read_mode!r}")
        if self.poll_interval_seconds <= 0:
            problems.append(f"POLL_INTERVAL_SECONDS must be positive, got {self.poll_interval_seconds}")
        if self.source_timezone:
            try:
                ZoneInfo(self.source_timezone)
            except (ZoneInfoNotFoundError, ValueError):
                problems.append(f"SOURCE_TIMEZONE is not a known zone: {self.source_timezone}")
        return problems


settings = Settings()


def configure_logging(settings: Settings) -> None:
    """Structured logging: JSON for production, human-readable for local."""
    if settings.is_production:
        logging.basicConfig(
            level=logging.INFO,
            format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
            stream=sys.stdout,
        )
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
