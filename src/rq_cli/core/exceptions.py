"""
Иерархия исключений rq.

Классификация:
- ConfigError - клиент не может быть построен
- BuildError - запрос не может быть собран из конфигурации
- TransportError - запрос не дошёл до сервера или ответ не был получен
- OutputError - ответ не удалось записать

Все ошибки фатальные: первая же прерывает запуск.
"""

from typing import Optional

import httpx
import requests

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RqError(Exception):
    """Базовое исключение rq."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

class ConfigError(RqError):
    """Ошибка конфигурации клиента или настроек."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ СБОРКИ ЗАПРОСА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class BuildError(RqError):
    """Запрос не может быть собран."""
    pass

class InvalidURLError(BuildError):
    """URL не абсолютный или не http(s)."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        msg = f"invalid url: {url!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)

class MalformedHeaderError(BuildError):
    """Заголовок не в формате Key=Value."""

    def __init__(self, header: str):
        self.header = header
        super().__init__(f"malformed header {header!r}: expected Key=Value")

class HeaderFileError(BuildError):
    """Файл заголовков не читается или не является JSON объектом."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"cannot load headers from {path}: {reason}")

class BadHeaderValueError(BuildError):
    """Значение в файле заголовков не строка."""

    def __init__(self, path: str, key: str, value: object):
        self.path = path
        self.key = key
        super().__init__(
            f"header {key!r} in {path} must be a string, got {type(value).__name__}"
        )

class HeaderEncodingError(BuildError):
    """Заголовок нельзя отправить: имя не ASCII или значение не Latin-1."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"header {key!r} cannot be sent: names must be ASCII and values Latin-1"
        )

class MalformedAuthError(BuildError):
    """Basic auth не в формате user:pass."""

    def __init__(self):
        super().__init__("malformed basic auth: expected user:pass")

class MissingFileError(BuildError):
    """Файл, на который ссылается @path, не существует."""

    def __init__(self, path: str, what: str = "file"):
        self.path = path
        super().__init__(f"{what} not found: {path}")

class FormError(BuildError):
    """Описание multipart формы не является JSON объектом."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ТРАНСПОРТА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(RqError):
    """Сетевая ошибка."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = f"{message}"
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - Network unreachable
    """
    pass

class DNSError(TransportError):
    """DNS resolution failed."""
    pass

class ProxyError(TransportError):
    """Ошибка прокси."""
    pass

class TimeoutError(TransportError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout: Значение таймаута (сек)
    """

    def __init__(self, message: str, url: Optional[str] = None, timeout: Optional[float] = None):
        self.timeout = timeout
        msg = message
        if timeout:
            msg += f" (timeout: {timeout}s)"
        super().__init__(msg, url)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ВЫВОД
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class OutputError(RqError):
    """Ответ не удалось записать в файл."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"cannot write {path}: {reason}")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

_DNS_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "failed to resolve",
    "name resolution",
    "getaddrinfo failed",
    "no address associated",
)

def _looks_like_dns_failure(exc: Exception) -> bool:
    text = str(exc).lower()
    return any(marker in text for marker in _DNS_MARKERS)

def classify_requests_exception(
    exc: Exception,
    url: str,
    timeout: Optional[float] = None
) -> RqError:
    """
    Конвертировать requests.exceptions в наши исключения.

    Args:
        exc: Исключение из requests
        url: URL запроса
        timeout: Таймаут запроса (для сообщения)

    Returns:
        Наше исключение с правильной классификацией

    Examples:
        >>> exc = requests.exceptions.ReadTimeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com", 5)
        >>> assert isinstance(our_exc, TimeoutError)
    """

    if isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url, timeout)

    elif isinstance(exc, requests.exceptions.ProxyError):
        return ProxyError(f"Proxy error: {exc}", url)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        if _looks_like_dns_failure(exc):
            return DNSError("DNS resolution failed", url)
        return ConnectionError(f"Connection error: {exc}", url)

    elif isinstance(exc, (requests.exceptions.MissingSchema,
                          requests.exceptions.InvalidSchema,
                          requests.exceptions.InvalidURL)):
        return InvalidURLError(url, str(exc))

    elif isinstance(exc, requests.exceptions.InvalidHeader):
        return MalformedHeaderError(str(exc))

    elif isinstance(exc, requests.exceptions.TooManyRedirects):
        return TransportError("Too many redirects", url)

    elif isinstance(exc, requests.exceptions.RequestException):
        return TransportError(f"Request failed: {exc}", url)

    else:
        # Неизвестная ошибка - оборачиваем
        return RqError(str(exc))

def classify_httpx_exception(
    exc: Exception,
    url: str,
    timeout: Optional[float] = None
) -> RqError:
    """
    Конвертировать исключения httpx (HTTP/2 транспорт) в наши исключения.

    Args:
        exc: Исключение из httpx
        url: URL запроса
        timeout: Таймаут запроса (для сообщения)

    Returns:
        Наше исключение с правильной классификацией
    """

    if isinstance(exc, httpx.TimeoutException):
        return TimeoutError("Request timeout", url, timeout)

    elif isinstance(exc, httpx.ProxyError):
        return ProxyError(f"Proxy error: {exc}", url)

    elif isinstance(exc, httpx.ConnectError):
        if _looks_like_dns_failure(exc):
            return DNSError("DNS resolution failed", url)
        return ConnectionError(f"Connection error: {exc}", url)

    elif isinstance(exc, (httpx.UnsupportedProtocol, httpx.InvalidURL)):
        return InvalidURLError(url, str(exc))

    elif isinstance(exc, httpx.LocalProtocolError):
        return MalformedHeaderError(str(exc))

    elif isinstance(exc, httpx.TooManyRedirects):
        return TransportError("Too many redirects", url)

    elif isinstance(exc, httpx.HTTPError):
        return TransportError(f"Request failed: {exc}", url)

    else:
        return RqError(str(exc))
