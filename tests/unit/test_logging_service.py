"""Tests for logging service configuration."""

import logging
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from vaad.services.logging import (
    LEDGER_LOGGER,
    get_log_level,
    parse_log_level,
    setup_server_logging,
)

MANAGED_LOGGERS = (LEDGER_LOGGER, "sqlalchemy.engine", "aiosqlite")


class TestLogLevels:
    """Test level name parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [("DEBUG", logging.DEBUG), ("warning", logging.WARNING), (" ERROR ", logging.ERROR), ("verbose", logging.INFO)],
    )
    def test_parse_log_level(self, value, expected):
        assert parse_log_level(value) == expected

    def test_parse_empty_uses_default(self):
        assert parse_log_level(None, default=logging.WARNING) == logging.WARNING
        assert parse_log_level("", default=logging.ERROR) == logging.ERROR

    def test_level_from_env(self):
        with patch.dict("os.environ", {"LEDGER_LOG_LEVEL": "DEBUG"}, clear=False):
            assert get_log_level("LEDGER_LOG_LEVEL") == logging.DEBUG

    def test_missing_env_uses_default(self):
        with patch.dict("os.environ", {}, clear=True):
            assert get_log_level("LEDGER_LOG_LEVEL", default=logging.WARNING) == logging.WARNING


class TestServerLogging:
    """Test server logging configuration."""

    def setup_method(self):
        """Save root handlers and managed logger levels before each test."""
        self.root_logger = logging.getLogger()
        self.original_handlers = self.root_logger.handlers.copy()
        self.original_level = self.root_logger.level
        self.original_levels = {name: logging.getLogger(name).level for name in MANAGED_LOGGERS}

    def teardown_method(self):
        """Restore original handlers and levels after each test."""
        self.root_logger = logging.getLogger()
        for handler in self.root_logger.handlers[:]:
            handler.close()
            self.root_logger.removeHandler(handler)
        for handler in self.original_handlers:
            self.root_logger.addHandler(handler)
        self.root_logger.setLevel(self.original_level)
        for name, level in self.original_levels.items():
            logging.getLogger(name).setLevel(level)

    def test_setup_server_logging_creates_log_directory(self) -> None:
        """Verify setup_server_logging creates the log directory if missing."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "test_logs" / "server.log"
            assert not log_file.parent.exists()

            setup_server_logging(str(log_file), log_level=logging.INFO)

            assert log_file.parent.exists()

    def test_setup_server_logging_replaces_handlers(self) -> None:
        """Verify exactly stdout + file handlers remain after repeated setup."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "server.log"
            dummy_handler = logging.StreamHandler()
            self.root_logger.addHandler(dummy_handler)

            setup_server_logging(str(log_file), log_level=logging.INFO)
            setup_server_logging(str(log_file), log_level=logging.INFO)

            assert len(self.root_logger.handlers) == 2
            assert dummy_handler not in self.root_logger.handlers

    def test_levels_from_environment(self) -> None:
        """Verify LOG_LEVEL and LEDGER_LOG_LEVEL are read when no levels are passed."""
        with tempfile.TemporaryDirectory() as temp_dir:
            env = {"LOG_LEVEL": "WARNING", "LEDGER_LOG_LEVEL": "DEBUG"}
            with patch.dict("os.environ", env, clear=False):
                setup_server_logging(str(Path(temp_dir) / "server.log"))

            assert self.root_logger.level == logging.WARNING
            assert logging.getLogger(LEDGER_LOGGER).level == logging.DEBUG

    def test_ledger_level_defaults_to_root_level(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with patch.dict("os.environ", {}, clear=True):
                setup_server_logging(str(Path(temp_dir) / "server.log"), log_level=logging.ERROR)

            assert logging.getLogger(LEDGER_LOGGER).level == logging.ERROR

    def test_ledger_debug_without_verbose_server(self) -> None:
        """Verify skipped-record DEBUG lines reach the file while other DEBUG output does not."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "server.log"

            setup_server_logging(str(log_file), log_level=logging.INFO, ledger_log_level=logging.DEBUG)

            logging.getLogger("vaad.services.debt_service").debug("Meter reading id=9 belongs to an unattributed station")
            logging.getLogger("uvicorn.error").debug("connection details")

            log_contents = log_file.read_text(encoding="utf-8")
            assert "vaad.services.debt_service - DEBUG - Meter reading id=9" in log_contents
            assert "connection details" not in log_contents

    def test_sql_statements_stay_quiet(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            setup_server_logging(str(Path(temp_dir) / "server.log"), log_level=logging.INFO)

            assert not logging.getLogger("sqlalchemy.engine.Engine").isEnabledFor(logging.INFO)

    def test_setup_server_logging_formatter(self) -> None:
        """Verify file lines carry timestamp, logger name and level."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "server.log"

            setup_server_logging(str(log_file), log_level=logging.INFO)

            logging.getLogger("vaad.services.amounts").warning("Skipping fee payment record id=3")

            log_contents = log_file.read_text(encoding="utf-8")
            assert "[20" in log_contents
            assert "vaad.services.amounts - WARNING - Skipping fee payment record id=3" in log_contents

    def test_setup_server_logging_writes_utf8(self) -> None:
        """Verify Hebrew labels survive the file handler."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "server.log"

            setup_server_logging(str(log_file), log_level=logging.INFO)

            logging.getLogger("vaad.services.balance_service").info("דמי ועד")

            assert "דמי ועד" in log_file.read_text(encoding="utf-8")
