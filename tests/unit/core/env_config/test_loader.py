"""Tests for settings loading (env + config file)."""

import json

import pytest

from rq_cli.core.env_config import load_settings
from rq_cli.core.exceptions import ConfigError


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults(self):
        settings = load_settings()

        assert settings.user_agent is None
        assert settings.default_timeout == 30.0
        assert settings.proxy is None
        assert settings.log_level is None
        assert settings.log_format == "text"
        assert settings.config_file is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("RQ_USER_AGENT", "env-agent/1.0")
        monkeypatch.setenv("RQ_DEFAULT_TIMEOUT", "12.5")
        monkeypatch.setenv("RQ_LOG_LEVEL", "debug")

        settings = load_settings()

        assert settings.user_agent == "env-agent/1.0"
        assert settings.default_timeout == 12.5
        assert settings.log_level == "DEBUG"

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "rq.yaml"
        path.write_text("rq:\n  user_agent: file-agent/1.0\n  default_timeout: 9\n")

        settings = load_settings(str(path))

        assert settings.user_agent == "file-agent/1.0"
        assert settings.default_timeout == 9
        assert settings.config_file == str(path)

    def test_from_json_file_without_section(self, tmp_path):
        path = tmp_path / "rq.json"
        path.write_text(json.dumps({"proxy": "http://proxy.local:3128", "log_format": "JSON"}))

        settings = load_settings(str(path))

        assert settings.proxy == "http://proxy.local:3128"
        assert settings.log_format == "json"

    def test_env_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "rq.yaml"
        path.write_text("user_agent: file-agent/1.0\ndefault_timeout: 9\n")
        monkeypatch.setenv("RQ_USER_AGENT", "env-agent/1.0")

        settings = load_settings(str(path))

        assert settings.user_agent == "env-agent/1.0"
        assert settings.default_timeout == 9

    def test_config_file_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "rq.yml"
        path.write_text("user_agent: from-env-file/1.0\n")
        monkeypatch.setenv("RQ_CONFIG_FILE", str(path))

        assert load_settings().user_agent == "from-env-file/1.0"

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("RQ_DEFAULT_TIMEOUT", "-1")

        with pytest.raises(ConfigError, match="default_timeout"):
            load_settings()

    def test_invalid_file_value(self, tmp_path):
        path = tmp_path / "rq.yaml"
        path.write_text("log_level: LOUD\n")

        with pytest.raises(ConfigError, match="log_level"):
            load_settings(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="cannot read config file"):
            load_settings(str(tmp_path / "missing.yaml"))
