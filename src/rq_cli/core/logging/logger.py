"""
Main logger for rq.

Wraps a stdlib logger with configured handlers and masks secrets in every
structured field before it is emitted.
"""

import logging
from typing import Optional, Any

from .config import LoggingConfig, LogLevel
from .formatters import get_formatter
from .filters import ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data


class RqLogger:
    """
    Logger for rq.

    Features:
    - Console (stderr) and rotating file handlers
    - JSON, text and colored formats
    - Structured keyword fields, with Authorization/Cookie values masked

    Example:
        >>> config = LoggingConfig.create(level="DEBUG", format="colored")
        >>> logger = RqLogger(config)
        >>> logger.info("Request completed", method="GET", status_code=200)
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "rq_cli"):
        """
        Initialize logger.

        Args:
            config: Logging configuration (uses defaults if None)
            name: Logger name
        """
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        self._logger = logging.getLogger(name)
        self._logger.setLevel(self._get_level(self.config.level))
        self._logger.propagate = False

        # Remove existing handlers (if reinitializing)
        self._logger.handlers.clear()

        filters = []
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._logger.addHandler(create_console_handler(
                level=self._get_level(self.config.level),
                formatter=formatter,
                filters=filters
            ))

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=self.config.file_path,
                level=self._get_level(self.config.level),
                formatter=formatter,
                max_bytes=self.config.max_bytes,
                backup_count=self.config.backup_count,
                filters=filters
            ))

    def _get_level(self, level: LogLevel) -> int:
        """Convert LogLevel enum to logging level int."""
        return getattr(logging, level.value)

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        self._logger.log(level, message, extra=mask_sensitive_data(kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        """
        Log debug message.

        Example:
            >>> logger.debug("Request built", method="POST", url="https://api.com")
        """
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self._log(logging.ERROR, message, **kwargs)

    def close(self) -> None:
        """
        Flush and close all handlers.

        Idempotent - safe to call multiple times.
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close logger on context exit."""
        self.close()
        return False


def configure_logging(config: LoggingConfig) -> RqLogger:
    """
    Create the logger for one invocation.

    Args:
        config: Logging configuration

    Returns:
        New RqLogger instance
    """
    return RqLogger(config)
