"""rq - one-shot HTTP requests from the command line."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.config import HttpMethod, AuthConfig, RequestConfig
from .core.client import Client, build_client
from .core.request_builder import build_request
from .core.executor import execute
from .core.response_handler import handle_response
from .core.exceptions import (
    RqError,
    ConfigError,
    BuildError,
    TransportError,
    TimeoutError,
    OutputError,
)

# Set up logging - add NullHandler to prevent "No handler found" warnings
logging.getLogger('rq_cli').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("rq-cli")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    "HttpMethod",
    "AuthConfig",
    "RequestConfig",
    "Client",
    "build_client",
    "build_request",
    "execute",
    "handle_response",
    "RqError",
    "ConfigError",
    "BuildError",
    "TransportError",
    "TimeoutError",
    "OutputError",
    "__version__",
]
