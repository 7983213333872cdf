"""Logging configuration for the report server.

Two independent levels:

- ``LOG_LEVEL`` (default INFO) applies to everything, including uvicorn and
  FastAPI.
- ``LEDGER_LOG_LEVEL`` (default: same as LOG_LEVEL) applies only to the
  ``vaad`` loggers. Set it to DEBUG to see every skipped, unattributed or
  ambiguous ledger record without turning the rest of the server verbose.

SQLAlchemy's engine logger is pinned to WARNING: at INFO it would print every
SQL statement of every snapshot fetch.
"""

import logging
import os
import sys
from pathlib import Path

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LEDGER_LOGGER = "vaad"
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite")

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_log_level(value: str | None, default: int = logging.INFO) -> int:
    """Map a level name to its logging constant; unknown or empty names give ``default``."""
    if not value:
        return default
    return LOG_LEVEL_MAP.get(value.strip().upper(), default)


def get_log_level(env_var: str = "LOG_LEVEL", default: int = logging.INFO) -> int:
    """Get logging level from an environment variable.

    Returns:
        Logging level constant (default: INFO)
    """
    return parse_log_level(os.getenv(env_var), default)


def setup_server_logging(
    log_file: str = "logs/server.log",
    log_level: int | None = None,
    ledger_log_level: int | None = None,
) -> None:
    """
    Configure root and ledger loggers for the report server.

    Args:
        log_file: Path to log file (default: logs/server.log)
        log_level: Root level (default: from LOG_LEVEL)
        ledger_log_level: Level of the ``vaad`` loggers (default: from
            LEDGER_LOG_LEVEL, falling back to the root level)

    Behavior:
        - stdout and UTF-8 file output share one formatter
        - Handlers pass everything through; logger levels do the filtering
        - Replaces previously installed root handlers
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    if log_level is None:
        log_level = get_log_level()
    if ledger_log_level is None:
        ledger_log_level = get_log_level("LEDGER_LOG_LEVEL", default=log_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    logging.getLogger(LEDGER_LOGGER).setLevel(ledger_log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, log_level))


__all__ = [
    "LEDGER_LOGGER",
    "LOG_LEVEL_MAP",
    "get_log_level",
    "parse_log_level",
    "setup_server_logging",
]
