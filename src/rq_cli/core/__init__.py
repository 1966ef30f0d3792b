"""Core модули rq: конфигурация, клиент, сборка и выполнение запроса."""

from .config import (
    HttpMethod,
    InlineSource,
    FileSource,
    AuthConfig,
    RequestConfig,
    parse_source,
)
from .client import Client, ClientOptions, TransportKind, build_client
from .models import Request, Response, FilePart, TextPart
from .request_builder import build_request
from .executor import execute
from .response_handler import handle_response
from .exceptions import (
    RqError,
    ConfigError,
    BuildError,
    InvalidURLError,
    MalformedHeaderError,
    HeaderFileError,
    BadHeaderValueError,
    HeaderEncodingError,
    MalformedAuthError,
    MissingFileError,
    FormError,
    TransportError,
    ConnectionError,
    DNSError,
    ProxyError,
    TimeoutError,
    OutputError,
    classify_requests_exception,
    classify_httpx_exception,
)

__all__ = [
    # Config
    "HttpMethod",
    "InlineSource",
    "FileSource",
    "AuthConfig",
    "RequestConfig",
    "parse_source",
    # Pipeline
    "Client",
    "ClientOptions",
    "TransportKind",
    "build_client",
    "Request",
    "Response",
    "FilePart",
    "TextPart",
    "build_request",
    "execute",
    "handle_response",
    # Exceptions
    "RqError",
    "ConfigError",
    "BuildError",
    "InvalidURLError",
    "MalformedHeaderError",
    "HeaderFileError",
    "BadHeaderValueError",
    "HeaderEncodingError",
    "MalformedAuthError",
    "MissingFileError",
    "FormError",
    "TransportError",
    "ConnectionError",
    "DNSError",
    "ProxyError",
    "TimeoutError",
    "OutputError",
    "classify_requests_exception",
    "classify_httpx_exception",
]
