"""Tests for logging setup and progress tracking."""

import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

import colorlog

from logger import LOGGER_NAME, ProgressTracker, _sanitize_config, setup_logging


class TestSetupLogging(unittest.TestCase):
    def test_verbosity_levels(self):
        self.assertEqual(setup_logging(verbosity=-1).level, logging.WARNING)
        self.assertEqual(setup_logging(verbosity=0).level, logging.INFO)
        self.assertEqual(setup_logging(verbosity=2).level, logging.DEBUG)

    def test_explicit_level_wins(self):
        self.assertEqual(setup_logging(verbosity=1, level='error').level, logging.ERROR)

    def test_invalid_level(self):
        with self.assertRaises(ValueError):
            setup_logging(level='LOUD')

    def test_console_handler_is_colored(self):
        logger = setup_logging()

        self.assertEqual(logger.name, LOGGER_NAME)
        self.assertEqual(len(logger.handlers), 1)
        self.assertIsInstance(logger.handlers[0].formatter, colorlog.ColoredFormatter)

    def test_log_file(self):
        """Test a rotating file handler is added when a log file is given."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / 'sync.log'
            logger = setup_logging(log_file=str(log_file))
            logger.info('hello file')

            for handler in logger.handlers:
                handler.flush()
            content = log_file.read_text(encoding='utf-8')

            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()

        self.assertIn('hello file', content)


class TestProgressTracker(unittest.TestCase):
    def test_counts_and_summary(self):
        """Test the tracker counts outcomes and warns when some items failed."""
        mock_logger = MagicMock()

        with ProgressTracker(total_items=3, logger=mock_logger) as tracker:
            self.assertEqual(tracker.position, '1/3')
            tracker.increment(success=True)
            tracker.increment(success=False)
            tracker.increment(success=True)

        self.assertEqual(tracker.processed_items, 3)
        self.assertEqual(tracker.successful_items, 2)
        self.assertEqual(tracker.failed_items, 1)
        mock_logger.warning.assert_called_once()
        self.assertIn('2/3 succeeded', mock_logger.warning.call_args.args[0])

    def test_all_failed_logs_error(self):
        mock_logger = MagicMock()

        with ProgressTracker(total_items=1, logger=mock_logger) as tracker:
            tracker.increment(success=False)

        mock_logger.error.assert_called_once()


class TestSanitizeConfig(unittest.TestCase):
    def test_token_is_redacted(self):
        config = {'notion': {'token': 'secret_abc', 'root_page_id': 'root'}}

        sanitized = _sanitize_config(config)

        self.assertEqual(sanitized['notion']['token'], '***REDACTED***')
        self.assertEqual(sanitized['notion']['root_page_id'], 'root')
        self.assertEqual(config['notion']['token'], 'secret_abc')


if __name__ == '__main__':
    unittest.main()
