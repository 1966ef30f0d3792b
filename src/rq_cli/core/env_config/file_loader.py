"""
Configuration file loader for YAML and JSON files.

A config file holds the same keys as the RQ_* environment variables, either at
the top level or under an ``rq:`` section::

    rq:
      user_agent: my-tool/1.0
      default_timeout: 10
      log_level: INFO
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from ..exceptions import ConfigError


class ConfigFileLoader:
    """
    Загрузчик настроек из файлов.

    Examples:
        >>> data = ConfigFileLoader.from_file("rq.yaml")  # Auto-detect
        >>> data = ConfigFileLoader.from_json("rq.json")
    """

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> Dict[str, Any]:
        """
        Загрузить настройки из YAML файла.

        Raises:
            ConfigError: Файл не найден или невалидный
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"cannot read config file {path}: {e.strerror or e}")
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML syntax in {path}: {e}")

        return ConfigFileLoader._extract(data, str(path))

    @staticmethod
    def from_json(path: Union[str, Path]) -> Dict[str, Any]:
        """
        Загрузить настройки из JSON файла.

        Raises:
            ConfigError: Файл не найден или невалидный
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigError(f"cannot read config file {path}: {e.strerror or e}")
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON syntax in {path}: {e}")

        return ConfigFileLoader._extract(data, str(path))

    @staticmethod
    def from_file(path: Union[str, Path]) -> Dict[str, Any]:
        """
        Автоопределение формата по расширению (.yaml, .yml, .json).

        Raises:
            ConfigError: Формат не поддерживается, файл не найден или невалидный
        """
        path = Path(path).expanduser()
        suffix = path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            return ConfigFileLoader.from_yaml(path)
        elif suffix == ".json":
            return ConfigFileLoader.from_json(path)
        else:
            raise ConfigError(
                f"unsupported config file format: {suffix or path.name}. "
                f"Supported formats: .yaml, .yml, .json"
            )

    @staticmethod
    def _extract(data: Any, source: str) -> Dict[str, Any]:
        """Return the ``rq`` section (or the whole document) as a dict."""
        if data is None:
            return {}

        if isinstance(data, dict) and "rq" in data:
            data = data["rq"]

        if not isinstance(data, dict):
            raise ConfigError(
                f"config must be a mapping, got {type(data).__name__} in {source}"
            )
        return data
