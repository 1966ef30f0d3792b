"""
Logging system for rq.

Provides structured logging with multiple formats, handlers, and filters.

Example:
    >>> from rq_cli.core.logging import configure_logging, LoggingConfig
    >>>
    >>> config = LoggingConfig.create(level="DEBUG", format="colored")
    >>> logger = configure_logging(config)
    >>> logger.info("Request completed", method="GET", status_code=200)
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import RqLogger, configure_logging
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "RqLogger",
    "configure_logging",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "ExtraFieldsFilter",
    # Handlers
    "create_console_handler",
    "create_file_handler",
]
