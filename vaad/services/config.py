"""Configuration loading for the report server.

Loads settings from .env file and environment variables with sensible defaults.
Validates configuration and provides clear error messages.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from vaad.services.logging import LOG_LEVEL_MAP

DEFAULT_DATABASE_URL = "sqlite:///./vaad.db"


@dataclass
class AppConfig:
    """Configuration for the report server and CLI tools."""

    database_url: str = DEFAULT_DATABASE_URL
    """SQLAlchemy database URL (default: local SQLite)"""

    log_file: str = "logs/server.log"
    """Path to log file (default: logs/server.log)"""

    log_level: str = "INFO"
    """Level of the root logger (default: INFO)"""

    ledger_log_level: str | None = None
    """Level of the vaad loggers only (default: same as log_level)"""

    @property
    def async_database_url(self) -> str:
        """Database URL with the async driver for SQLite."""
        return to_async_url(self.database_url)


def to_async_url(database_url: str) -> str:
    """Swap the SQLite driver for aiosqlite; other URLs are returned unchanged.

    Example:
        >>> to_async_url("sqlite:///./vaad.db")
        'sqlite+aiosqlite:///./vaad.db'
    """
    if database_url.startswith("sqlite:///"):
        return database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return database_url


def load_config(env_file: str = ".env") -> AppConfig:
    """
    Load configuration from .env file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (DATABASE_URL, LOG_FILE, LOG_LEVEL, LEDGER_LOG_LEVEL)
    2. .env file in project root
    3. Default values

    Returns:
        AppConfig with all settings

    Raises:
        ValueError: If configuration is invalid
    """
    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(env_path)

    database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL).strip()
    log_file = os.getenv("LOG_FILE", "logs/server.log").strip()
    log_level = os.getenv("LOG_LEVEL", "").strip().upper() or "INFO"
    ledger_log_level = os.getenv("LEDGER_LOG_LEVEL", "").strip().upper() or None

    if "://" not in database_url:
        raise ValueError(
            f"DATABASE_URL is not a valid SQLAlchemy URL: {database_url!r}. "
            "Expected something like sqlite:///./vaad.db"
        )

    if not log_file:
        raise ValueError("LOG_FILE must not be empty")

    for name, level in (("LOG_LEVEL", log_level), ("LEDGER_LOG_LEVEL", ledger_log_level)):
        if level is not None and level not in LOG_LEVEL_MAP:
            raise ValueError(f"{name} must be one of {', '.join(LOG_LEVEL_MAP)}, got {level!r}")

    return AppConfig(
        database_url=database_url,
        log_file=log_file,
        log_level=log_level,
        ledger_log_level=ledger_log_level,
    )


__all__ = ["AppConfig", "DEFAULT_DATABASE_URL", "load_config", "to_async_url"]
