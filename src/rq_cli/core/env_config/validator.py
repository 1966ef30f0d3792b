"""
Pydantic validators for environment configuration.

Defaults for rq that are not worth a command-line flag every time.
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RqSettings(BaseSettings):
    """
    rq defaults from environment variables.

    Reads from:
    1. Environment variables (RQ_*)
    2. Values passed to the constructor (config file)
    3. Defaults

    Example environment:
        RQ_USER_AGENT=my-tool/1.0
        RQ_DEFAULT_TIMEOUT=10
        RQ_PROXY=http://proxy.local:3128
        RQ_LOG_LEVEL=DEBUG
        RQ_LOG_FORMAT=json
        RQ_LOG_FILE=/tmp/rq.log

    Usage:
        >>> settings = RqSettings()
        >>> settings.default_timeout
        30.0
    """

    model_config = SettingsConfigDict(
        env_prefix='RQ_',
        case_sensitive=False,
        extra='ignore',
    )

    user_agent: Optional[str] = Field(default=None, description="Default User-Agent")
    default_timeout: float = Field(default=30.0, gt=0, description="Client timeout in seconds")
    proxy: Optional[str] = Field(default=None, description="Default proxy URL")

    # None = logging disabled (unless log_file is set)
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_file: Optional[str] = None

    config_file: Optional[str] = Field(default=None, description="YAML/JSON file with defaults")

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        """Accept log levels in any case."""
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_format(cls, v):
        """Accept log formats in any case."""
        return v.lower() if isinstance(v, str) else v
