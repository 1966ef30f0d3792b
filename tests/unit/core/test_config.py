"""Тесты для модели конфигурации."""

from pathlib import Path

import pytest

from rq_cli.core.config import (
    AuthConfig,
    FileSource,
    HttpMethod,
    InlineSource,
    RequestConfig,
    parse_source,
)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HttpMethod
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@pytest.mark.parametrize("token,expected", [
    ("GET", HttpMethod.GET),
    ("post", HttpMethod.POST),
    ("Put", HttpMethod.PUT),
    ("patch", HttpMethod.PATCH),
    ("DELETE", HttpMethod.DELETE),
    ("head", HttpMethod.HEAD),
])
def test_method_resolve_case_insensitive(token, expected):
    """Тест разрешения метода без учёта регистра."""
    assert HttpMethod.resolve(token) is expected

@pytest.mark.parametrize("token", ["PUR", "OPTIONS", "", None])
def test_method_resolve_unknown_falls_back_to_get(token):
    """Неизвестный метод - это GET, не ошибка."""
    assert HttpMethod.resolve(token) is HttpMethod.GET

def test_method_values():
    """Тест полного набора методов."""
    assert [m.value for m in HttpMethod] == ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Source
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_parse_source_inline():
    """Тест inline значения."""
    assert parse_source("X-Token=abc") == InlineSource("X-Token=abc")

def test_parse_source_file():
    """Тест @path."""
    assert parse_source("@headers.json") == FileSource(Path("headers.json"))

def test_parse_source_lone_at_is_inline():
    """Одиночный @ - это literal."""
    assert parse_source("@") == InlineSource("@")

def test_parse_source_expands_home(monkeypatch, tmp_path):
    """Тест раскрытия ~ в пути."""
    monkeypatch.setenv("HOME", str(tmp_path))
    assert parse_source("@~/body.json") == FileSource(tmp_path / "body.json")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# AuthConfig
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_auth_repr_masks_secrets():
    """Секреты не попадают в repr."""
    auth = AuthConfig(basic="alice:secret", bearer="tok123")
    text = repr(auth)
    assert "secret" not in text
    assert "tok123" not in text
    assert "***" in text

def test_auth_defaults():
    """Тест дефолтных значений."""
    auth = AuthConfig()
    assert auth.basic is None
    assert auth.bearer is None

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RequestConfig
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_request_config_defaults():
    """Тест дефолтных значений."""
    config = RequestConfig(url="https://example.com")
    assert config.method == "GET"
    assert config.headers == ()
    assert config.cookies is None
    assert config.body is None
    assert config.form is None
    assert config.allow_redirects is True
    assert config.http2_only is False
    assert config.timeout_seconds is None
    assert config.download_path is None
    assert not config.pretty_print
    assert not config.verbose
    assert not config.debug

def test_request_config_create():
    """Тест конструктора из сырых флагов."""
    config = RequestConfig.create(
        "https://example.com",
        method="post",
        basic="alice:secret",
        headers=["Accept=application/json", "@extra.json"],
        cookies="@cookies.txt",
        data="hello",
        download="out.bin",
        timeout_seconds=5,
    )
    assert config.method == "post"
    assert config.auth.basic == "alice:secret"
    assert config.headers == (InlineSource("Accept=application/json"), FileSource(Path("extra.json")))
    assert config.cookies == FileSource(Path("cookies.txt"))
    assert config.body == InlineSource("hello")
    assert config.download_path == Path("out.bin")
    assert config.timeout_seconds == 5

def test_request_config_create_without_method_is_get():
    """Тест метода по умолчанию."""
    assert RequestConfig.create("https://example.com").method == "GET"

def test_request_config_headers_frozen_to_tuple():
    """Список заголовков превращается в tuple."""
    config = RequestConfig(url="https://example.com", headers=[InlineSource("A=1")])
    assert isinstance(config.headers, tuple)

@pytest.mark.parametrize("timeout", [0, -1])
def test_request_config_validation_timeout(timeout):
    """Тест валидации - неположительный таймаут."""
    with pytest.raises(ValueError, match="timeout must be positive"):
        RequestConfig(url="https://example.com", timeout_seconds=timeout)

def test_request_config_immutable():
    """Тест immutability."""
    config = RequestConfig(url="https://example.com")
    with pytest.raises(Exception):  # frozen dataclass
        config.url = "https://other.example.com"
