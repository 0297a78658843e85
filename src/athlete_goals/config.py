"""Centralized configuration for catalog locations and logging."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from athlete_goals.core.paths import DEFAULT_CATALOG_PATH, LOGS_DIR

CATALOG_PATH_ENV = "ATHLETE_GOALS_CATALOG_PATH"
LOG_DIR_ENV = "ATHLETE_GOALS_LOG_DIR"
LOG_LEVEL_ENV = "ATHLETE_GOALS_LOG_LEVEL"
LOG_RETENTION_ENV = "ATHLETE_GOALS_LOG_RETENTION_DAYS"
LOG_TO_FILE_ENV = "ATHLETE_GOALS_LOG_TO_FILE"

# Defaults used when corresponding environment variables are not set.
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_RETENTION_DAYS = 14
DEFAULT_LOG_TO_FILE = True

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class GoalsConfig:
    """Resolved settings for the CLI and report service."""

    catalog_path: Path = DEFAULT_CATALOG_PATH
    log_dir: Path = LOGS_DIR
    log_level: str = DEFAULT_LOG_LEVEL
    log_retention_days: int = DEFAULT_LOG_RETENTION_DAYS
    log_to_file: bool = DEFAULT_LOG_TO_FILE


def _read_path(name: str, default: Path) -> Path:
    value = os.getenv(name, "").strip()
    return Path(value) if value else default


def _read_positive_int(name: str, default: int) -> int:
    """Parse a positive integer from the environment variable named ``name``."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


def _read_bool(name: str, default: bool) -> bool:
    """Parse a boolean flag from the environment variable named ``name``."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean-like value, got {raw!r}.")


def _read_log_level(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    level = raw.strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"{name} must be one of {', '.join(LOG_LEVELS)}, got {raw!r}.")
    return level


def load_config() -> GoalsConfig:
    """Load and validate configuration from environment variables."""
    return GoalsConfig(
        catalog_path=_read_path(CATALOG_PATH_ENV, DEFAULT_CATALOG_PATH),
        log_dir=_read_path(LOG_DIR_ENV, LOGS_DIR),
        log_level=_read_log_level(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
        log_retention_days=_read_positive_int(LOG_RETENTION_ENV, DEFAULT_LOG_RETENTION_DAYS),
        log_to_file=_read_bool(LOG_TO_FILE_ENV, DEFAULT_LOG_TO_FILE),
    )


__all__ = ["GoalsConfig", "load_config"]
