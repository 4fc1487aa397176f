# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import unittest
from unittest.mock import patch

from src.config.logging_config import setup_logging
from src.config.settings import Settings


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Clean up the estate_predict logger before each test."""
        self.root_logger = logging.getLogger("estate_predict")
        self._clear_handlers()
        self.addCleanup(self._clear_handlers)

    def _clear_handlers(self) -> None:
        for handler in list(self.root_logger.handlers):
            handler.close()
        self.root_logger.handlers.clear()

    def _stream_handlers(self) -> list[logging.Handler]:
        return [
            h
            for h in self.root_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging()
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging()
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_log_file_inside_logs_dir(self) -> None:
        """Log file is created inside the configured logs/ directory."""
        log_path = setup_logging()
        self.assertEqual(log_path.parent, Settings.LOGS_DIR)

    def test_file_handler_level_debug(self) -> None:
        """File handler should be set to DEBUG level."""
        setup_logging()
        file_handlers = [
            h
            for h in self.root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_level_warning(self) -> None:
        """Console handler defaults to WARNING."""
        setup_logging()
        handlers = self._stream_handlers()
        self.assertEqual(len(handlers), 1)
        self.assertEqual(handlers[0].level, logging.WARNING)

    def test_console_level_from_settings(self) -> None:
        """CONSOLE_LOG_LEVEL overrides the stderr level."""
        with patch.object(Settings, "CONSOLE_LOG_LEVEL", "info"):
            setup_logging()
        self.assertEqual(self._stream_handlers()[0].level, logging.INFO)

    def test_bogus_console_level_falls_back(self) -> None:
        """An unknown level name falls back to WARNING."""
        with patch.object(Settings, "CONSOLE_LOG_LEVEL", "chatty"):
            setup_logging()
        self.assertEqual(self._stream_handlers()[0].level, logging.WARNING)

    def test_tui_mode_has_no_console_handler(self) -> None:
        """console=False keeps output in the log file only."""
        setup_logging(console=False)
        self.assertEqual(self._stream_handlers(), [])
        self.assertEqual(len(self.root_logger.handlers), 1)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging()
        count_before = len(self.root_logger.handlers)
        setup_logging()
        self.assertEqual(count_before, len(self.root_logger.handlers))

    def test_root_logger_level_is_debug(self) -> None:
        """The root project logger is set to DEBUG."""
        setup_logging()
        self.assertEqual(self.root_logger.level, logging.DEBUG)


if __name__ == "__main__":
    unittest.main()
