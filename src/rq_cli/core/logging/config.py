"""
Logging configuration for rq.

Provides configuration classes for structured logging.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any


class LogLevel(str, Enum):
    """Log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Configuration for rq logging.

    Logs go to stderr (the diagnostic stream) so they never mix with the
    response body on stdout.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (json, text, colored)
        enable_console: Enable console (stderr) logging
        enable_file: Enable file logging
        file_path: Path to log file (required if enable_file=True)
        max_bytes: Max log file size before rotation (default: 10MB)
        backup_count: Number of backup log files to keep (default: 5)
        extra_fields: Additional fields to add to every log entry

    Example:
        >>> config = LoggingConfig.create(
        ...     level="DEBUG",
        ...     format="json",
        ...     enable_file=True,
        ...     file_path="/tmp/rq.log"
        ... )
    """

    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate file settings."""
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")

    @classmethod
    def create(
        cls,
        level: str = "WARNING",
        format: str = "text",
        enable_console: bool = True,
        file_path: Optional[str] = None,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        extra_fields: Optional[Dict[str, Any]] = None
    ) -> "LoggingConfig":
        """
        Create LoggingConfig with string values.

        File logging is enabled when file_path is given.

        Args:
            level: Log level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            format: Log format as string (json, text, colored)
            enable_console: Enable console logging
            file_path: Path to log file
            max_bytes: Max file size before rotation
            backup_count: Number of backup files
            extra_fields: Additional fields for logs

        Returns:
            LoggingConfig instance
        """
        return cls(
            level=LogLevel(level.upper()),
            format=LogFormat(format.lower()),
            enable_console=enable_console,
            enable_file=bool(file_path),
            file_path=file_path,
            max_bytes=max_bytes,
            backup_count=backup_count,
            extra_fields=extra_fields or {}
        )
