"""
Pytest configuration and fixtures for rq tests.
"""

import json

import pytest
import responses as responses_lib

from rq_cli.core.client import Client, ClientOptions


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Tests never see RQ_* variables from the developer's shell."""
    for name in ("RQ_USER_AGENT", "RQ_DEFAULT_TIMEOUT", "RQ_PROXY", "RQ_LOG_LEVEL",
                 "RQ_LOG_FORMAT", "RQ_LOG_FILE", "RQ_CONFIG_FILE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    """HTTP/1.1 client instance for testing."""
    client = Client(ClientOptions(user_agent="rq-test/1.0", timeout=10))
    yield client
    client.close()


@pytest.fixture
def headers_file(tmp_path):
    """JSON header file with two string values."""
    path = tmp_path / "headers.json"
    path.write_text(json.dumps({"Accept": "application/json", "X-Trace": "abc"}))
    return path
