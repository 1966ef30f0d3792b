"""
Settings loader: environment variables and config file.

Main entry point for loading defaults.
"""

import os
from typing import Optional

from pydantic import ValidationError

from ..exceptions import ConfigError
from .file_loader import ConfigFileLoader
from .validator import RqSettings


def load_settings(config_file: Optional[str] = None) -> RqSettings:
    """
    Load RqSettings.

    Priority (highest to lowest):
    1. Environment variables (RQ_*)
    2. Config file (``config_file`` argument, else RQ_CONFIG_FILE)
    3. Defaults

    Command-line flags are applied on top of this by the CLI.

    Args:
        config_file: Path to a YAML/JSON config file

    Returns:
        RqSettings instance

    Raises:
        ConfigError: Invalid file or invalid values

    Example:
        >>> settings = load_settings("~/.config/rq.yaml")
        >>> settings.user_agent
        'my-tool/1.0'
    """
    path = config_file or os.environ.get("RQ_CONFIG_FILE")

    try:
        if not path:
            return RqSettings()

        file_values = ConfigFileLoader.from_file(path)
        env_values = RqSettings().model_dump(exclude_unset=True)
        # init kwargs beat env in pydantic-settings, so env goes in last
        return RqSettings(**{**file_values, **env_values, "config_file": str(path)})
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"invalid settings: {errors}")
