"""Structured logging with colored console output and progress tracking."""

import copy
import logging
import logging.handlers
import time
from typing import Any, Dict, Optional

import colorlog

LOGGER_NAME = 'notion_markdown_sync'

DEFAULT_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%H:%M:%S'


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """
    Set up the package logger.

    Args:
        verbosity: -1=WARNING, 0=INFO (per-page progress), 1+=DEBUG
        log_file: Optional path to a rotating log file
        level: Optional explicit level name, overrides verbosity

    Returns:
        Configured logger instance
    """
    if level:
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level_upper = level.upper()
        if level_upper not in allowed_levels:
            raise ValueError(
                f"Invalid log level '{level}'. Must be one of: {sorted(allowed_levels)}"
            )
        log_level = getattr(logging, level_upper)
    elif verbosity >= 1:
        log_level = logging.DEBUG
    elif verbosity < 0:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(colorlog.ColoredFormatter(
        fmt='%(log_color)s' + DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red,bg_white',
        }
    ))
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(fmt=DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
            logger.addHandler(file_handler)
            logger.debug(f"Logging to file: {log_file}")
        except OSError as e:
            logger.warning(f"Failed to set up file logging: {e}")

    return logger


class ProgressTracker:
    """Context manager for tracking progress across a sequence of pages."""

    def __init__(self, total_items: int, item_type: str = "pages", logger: Optional[logging.Logger] = None):
        self.total_items = total_items
        self.item_type = item_type
        self.processed_items = 0
        self.successful_items = 0
        self.failed_items = 0
        self.start_time: Optional[float] = None
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def __enter__(self) -> 'ProgressTracker':
        self.start_time = time.time()
        self.logger.debug(f"Starting processing of {self.total_items} {self.item_type}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Log a summary, louder when items failed."""
        if self.start_time is None:
            return

        elapsed = time.time() - self.start_time

        if self.failed_items > 0 and self.failed_items == self.total_items:
            log_method = self.logger.error
        elif self.failed_items > 0:
            log_method = self.logger.warning
        else:
            log_method = self.logger.info

        log_method(
            f"{self.item_type.capitalize()}: {self.successful_items}/{self.total_items} succeeded, "
            f"{self.failed_items} failed ({self._format_elapsed(elapsed)})"
        )

    def increment(self, success: bool = True) -> None:
        self.processed_items += 1
        if success:
            self.successful_items += 1
        else:
            self.failed_items += 1

    @property
    def position(self) -> str:
        """Human readable "n/total" for the item currently being processed."""
        return f"{self.processed_items + 1}/{self.total_items}"

    @staticmethod
    def _format_elapsed(seconds: float) -> str:
        """Format elapsed time in human-readable format."""
        if seconds < 60:
            return f"{seconds:.1f}s"

        minutes = int(seconds // 60)
        seconds = int(seconds % 60)

        if minutes < 60:
            return f"{minutes}m {seconds}s"

        hours = minutes // 60
        minutes = minutes % 60

        return f"{hours}h {minutes}m {seconds}s"


def log_section(title: str) -> None:
    """Log a decorative section header."""
    logger = logging.getLogger(LOGGER_NAME)

    separator = "=" * 60
    logger.info(separator)
    logger.info(f"  {title.upper()}")
    logger.info(separator)


def log_config(config: Dict[str, Any]) -> None:
    """Log the sanitized configuration at debug level."""
    logger = logging.getLogger(LOGGER_NAME)

    sanitized = _sanitize_config(config)
    notion = sanitized.get('notion', {})
    export_settings = sanitized.get('export', {})

    logger.debug(f"Notion API: {notion.get('base_url')} (version {notion.get('api_version')})")
    logger.debug(f"Token: {notion.get('token') or 'Not Set'}")
    logger.debug(f"Root page: {notion.get('root_page_id') or 'Not Set'}")
    logger.debug(f"Content directory: {export_settings.get('content_directory')}")
    logger.debug(f"Images directory: {export_settings.get('images_directory')}")
    logger.debug(f"Image URL prefix: {export_settings.get('image_url_prefix')}")
    logger.debug(f"Bookmark cards: {export_settings.get('bookmark_cards', False)}")


def _sanitize_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Copy configuration with sensitive fields masked."""
    sanitized = copy.deepcopy(config)

    sensitive_fields = {'token', 'secret', 'password', 'api_key'}

    def mask_sensitive(data: Any) -> Any:
        if isinstance(data, dict):
            masked = {}
            for key, value in data.items():
                is_sensitive = any(sensitive in key.lower() for sensitive in sensitive_fields)
                if is_sensitive and isinstance(value, str) and value:
                    masked[key] = "***REDACTED***"
                else:
                    masked[key] = mask_sensitive(value)
            return masked
        elif isinstance(data, list):
            return [mask_sensitive(item) for item in data]
        return data

    return mask_sensitive(sanitized)


__all__ = [
    'LOGGER_NAME',
    'setup_logging',
    'ProgressTracker',
    'log_section',
    'log_config'
]
