"""Settings dataclass for tsmscan configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Centralised scan configuration."""

    # Paths
    DATA_ROOT: str = "./data"

    # Detector
    OPEN_TIMEOUT_SEC: float = 1.0
    LOCK_POLL_INTERVAL_SEC: float = 0.05
    META_BUCKET: str = "meta"
    FORMAT_KEY: str = "format"
    LEGACY_FORMAT_VALUE: str = "v1"

    # Report
    EXCLUDE_FORMAT: str | None = "tsm1"
    DATABASES: tuple[str, ...] = ()

    # Logging
    LOG_LEVEL: str = "WARNING"
    LOG_FILE: str | None = None
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


DEFAULT_SETTINGS = Settings()

__all__ = ["Settings", "DEFAULT_SETTINGS"]
