"""
Environment configuration system for rq.

Load defaults from RQ_* environment variables and an optional YAML/JSON file.

Example:
    >>> from rq_cli.core.env_config import load_settings
    >>>
    >>> settings = load_settings()              # env + RQ_CONFIG_FILE
    >>> settings = load_settings("rq.yaml")     # explicit file
"""

from .loader import load_settings
from .validator import RqSettings
from .file_loader import ConfigFileLoader

__all__ = [
    "load_settings",
    "RqSettings",
    "ConfigFileLoader",
]
