# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import tempfile
import unittest
from pathlib import Path

from src.config.logging_config import (
    ROOT_LOGGER_NAME,
    RedactBearerFilter,
    setup_logging,
)


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Start each test with a bare catalog_admin logger."""
        self._tmp = tempfile.TemporaryDirectory()
        self.logs_dir = Path(self._tmp.name) / "logs"
        self.root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        self.root_logger.handlers.clear()

    def tearDown(self) -> None:
        for handler in list(self.root_logger.handlers):
            handler.close()
        self.root_logger.handlers.clear()
        self._tmp.cleanup()

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging(self.logs_dir)
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging(self.logs_dir)
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_log_file_inside_logs_dir(self) -> None:
        log_path = setup_logging(self.logs_dir)
        self.assertEqual(log_path.parent, self.logs_dir)

    def test_file_handler_level_debug(self) -> None:
        """File handler should be set to DEBUG level."""
        setup_logging(self.logs_dir)
        file_handlers = [
            h
            for h in self.root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_level_warning(self) -> None:
        """Console handler should be set to WARNING level."""
        setup_logging(self.logs_dir)
        stream_handlers = [
            h
            for h in self.root_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging(self.logs_dir)
        count_before = len(self.root_logger.handlers)
        setup_logging(self.logs_dir)
        self.assertEqual(len(self.root_logger.handlers), count_before)

    def test_child_logger_records_reach_file(self) -> None:
        """Module loggers under catalog_admin.* land in the run log."""
        log_path = setup_logging(self.logs_dir)
        logging.getLogger("catalog_admin.gateway").debug("marker-line")
        for handler in self.root_logger.handlers:
            handler.flush()
        self.assertIn("marker-line", log_path.read_text(encoding="utf-8"))

    def test_bearer_tokens_masked_in_run_log(self) -> None:
        log_path = setup_logging(self.logs_dir)
        logging.getLogger("catalog_admin.gateway").warning(
            "Sent Authorization: %s", "Bearer eyJhbGci.payload.sig"
        )
        for handler in self.root_logger.handlers:
            handler.flush()
        text = log_path.read_text(encoding="utf-8")
        self.assertIn("Bearer ***", text)
        self.assertNotIn("eyJhbGci", text)


class TestRedactBearerFilter(unittest.TestCase):
    """Token masking on individual records."""

    def _record(self, msg: str, *args: object) -> logging.LogRecord:
        return logging.LogRecord(
            "catalog_admin.auth", logging.INFO, __file__, 1, msg, args, None
        )

    def test_masks_token_and_keeps_record(self) -> None:
        record = self._record("header %s", "Bearer abc.def")
        self.assertTrue(RedactBearerFilter().filter(record))
        self.assertEqual(record.getMessage(), "header Bearer ***")

    def test_plain_messages_untouched(self) -> None:
        record = self._record("page %d of %d", 1, 3)
        RedactBearerFilter().filter(record)
        self.assertEqual(record.args, (1, 3))
        self.assertEqual(record.getMessage(), "page 1 of 3")


if __name__ == "__main__":
    unittest.main()
