"""Unit tests for logging configuration."""

import unittest
import logging
import os
import shutil
import tempfile
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.logging_config import (
    get_logger, log_with_context, setup_logging, StructuredFormatter
)


class TestLoggingConfig(unittest.TestCase):
    """Test cases for logging helpers."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        root_logger = logging.getLogger()
        self._saved_handlers = list(root_logger.handlers)
        self._saved_level = root_logger.level

    def tearDown(self):
        """Restore the root logger."""
        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        for handler in self._saved_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(self._saved_level)
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_get_logger_is_cached_and_namespaced(self):
        """Test component loggers live under the catpoint namespace."""
        logger = get_logger("test_component")

        self.assertEqual(logger.name, "catpoint.test_component")
        self.assertIs(get_logger("test_component"), logger)
        self.assertEqual(len(logger.filters), 1)

    def test_setup_logging_creates_log_files(self):
        """Test setup installs file handlers in the log directory."""
        manager = setup_logging("debug", self.test_dir)
        get_logger("test_setup").error("something broke")

        self.assertEqual(manager.log_level, logging.DEBUG)
        stats = manager.get_log_stats()
        self.assertIn("catpoint.log", stats["log_files"])
        self.assertIn("errors.log", stats["log_files"])

        manager.set_log_level(logging.WARNING)
        self.assertEqual(logging.getLogger().level, logging.WARNING)

    def test_log_with_context(self):
        """Test context is attached to the log record and formatted."""
        logger = get_logger("test_context")

        with self.assertLogs("catpoint.test_context", level="INFO") as captured:
            log_with_context(logger, logging.INFO, "Alarm status set to ALARM",
                             {"current": "ALARM", "trigger": "sensor"})

        record = captured.records[0]
        self.assertEqual(record.context, {"current": "ALARM", "trigger": "sensor"})
        formatted = StructuredFormatter(include_context=True).format(record)
        self.assertIn("Context: current=ALARM | trigger=sensor", formatted)


if __name__ == '__main__':
    unittest.main()
