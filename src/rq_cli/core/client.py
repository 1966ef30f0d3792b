# src/rq_cli/core/client.py
"""
Client Factory.

Строит одноразовый клиент из транспортной части конфигурации: прокси,
редиректы, версия HTTP, User-Agent, дефолтный таймаут. Клиент создаётся один
раз на запуск и закрывается в конце.
"""

import socket
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlsplit

import httpx
import requests
from requests.adapters import HTTPAdapter

from .config import RequestConfig
from .exceptions import (
    ConfigError,
    RqError,
    TimeoutError,
    classify_httpx_exception,
    classify_requests_exception,
)
from .models import Request, Response

if TYPE_CHECKING:
    from .env_config import RqSettings
    from .logging import RqLogger


DEFAULT_TIMEOUT = 30.0
PROXY_SCHEMES = ('http', 'https', 'socks4', 'socks5', 'socks5h')
CHUNK_SIZE = 8192


def default_user_agent() -> str:
    """User-Agent по умолчанию: rq-cli/<version>."""
    from .. import __version__
    return f"rq-cli/{__version__}"


class TransportKind(str, Enum):
    """Транспорт клиента."""
    HTTP1 = "http/1.1"
    HTTP2 = "http/2"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CLIENT OPTIONS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ClientOptions:
    """
    Транспортная конфигурация клиента.

    Args:
        user_agent: User-Agent для всех запросов
        timeout: Дефолтный таймаут (сек)
        allow_redirects: Следовать редиректам
        http2_only: Только HTTP/2, без отката на HTTP/1.1
        proxy: URL прокси для всех схем

    Examples:
        >>> ClientOptions(user_agent="rq-cli/1.0")
        >>> ClientOptions(user_agent="rq-cli/1.0", proxy="http://proxy:3128", http2_only=True)
    """
    user_agent: str
    timeout: float = DEFAULT_TIMEOUT
    allow_redirects: bool = True
    http2_only: bool = False
    proxy: Optional[str] = None

    def __post_init__(self):
        """Валидация."""
        if self.timeout <= 0:
            raise ConfigError("default timeout must be positive")
        if self.proxy is not None:
            validate_proxy(self.proxy)

    @property
    def transport(self) -> TransportKind:
        return TransportKind.HTTP2 if self.http2_only else TransportKind.HTTP1


def validate_proxy(proxy: str) -> str:
    """
    Проверить URL прокси.

    Raises:
        ConfigError: Нет схемы/хоста или схема не поддерживается

    Examples:
        >>> validate_proxy("http://proxy.local:3128")
        'http://proxy.local:3128'
    """
    try:
        parts = urlsplit(proxy)
        parts.port  # ValueError на мусорном порте
    except ValueError as e:
        raise ConfigError(f"invalid proxy {proxy!r}: {e}")

    if parts.scheme.lower() not in PROXY_SCHEMES or not parts.hostname:
        raise ConfigError(
            f"invalid proxy {proxy!r}: expected <scheme>://<host>[:port] "
            f"with scheme in {', '.join(PROXY_SCHEMES)}"
        )
    return proxy


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CLIENT
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class Client:
    """
    Одноразовый HTTP клиент.

    Features:
        - HTTP/1.1 через requests.Session
        - HTTP/2-only через httpx.Client с отключённым HTTP/1.1
        - Один запрос за запуск, без ретраев
        - Контекстный менеджер для освобождения ресурсов
    """

    def __init__(
        self,
        options: ClientOptions,
        session: Union[requests.Session, httpx.Client, None] = None,
    ):
        """
        Args:
            options: Транспортная конфигурация
            session: Готовая сессия нужного транспорта (по умолчанию создаётся)
        """
        self._options = options
        self._senders: Dict[TransportKind, Callable[[Request], Response]] = {
            TransportKind.HTTP1: self._send_http1,
            TransportKind.HTTP2: self._send_http2,
        }
        if session is None:
            session = _SESSION_FACTORIES[options.transport](options)
        self._session = session

    def __enter__(self):
        """Поддержка контекстного менеджера"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Автоматическое закрытие сессии при выходе из контекста"""
        self.close()
        return False

    @property
    def options(self) -> ClientOptions:
        return self._options

    @property
    def headers(self) -> Mapping[str, str]:
        """Заголовки, которые клиент добавляет к каждому запросу."""
        return {"User-Agent": self._options.user_agent}

    @property
    def session(self) -> Union[requests.Session, httpx.Client]:
        return self._session

    def close(self):
        """Закрывает сессию и освобождает соединения."""
        self._session.close()

    def send(self, request: Request) -> Response:
        """
        Отправить запрос ровно один раз.

        Блокирует до получения заголовков ответа; тело читается лениво
        через Response.iter_bytes().

        Raises:
            TransportError: Сетевая ошибка, DNS, прокси
            TimeoutError: Истёк таймаут
        """
        return self._senders[self._options.transport](request)

    def _timeout_for(self, request: Request) -> float:
        return request.timeout if request.timeout is not None else self._options.timeout

    # ==================== HTTP/1.1 (requests) ====================

    def _send_http1(self, request: Request) -> Response:
        timeout = self._timeout_for(request)
        deadline = time.monotonic() + timeout

        try:
            with request.open_payload() as (data, files):
                raw = self._session.request(
                    method=request.method.value,
                    url=request.url,
                    headers=dict(request.headers),
                    data=data,
                    files=files,
                    timeout=timeout,
                    allow_redirects=self._options.allow_redirects,
                    stream=True,
                )
        except requests.exceptions.RequestException as e:
            raise classify_requests_exception(e, request.url, timeout) from e

        _check_deadline(deadline, raw.close, request.url, timeout)

        def chunks():
            try:
                yield from raw.iter_content(chunk_size=CHUNK_SIZE)
            except requests.exceptions.RequestException as e:
                raise classify_requests_exception(e, request.url, timeout) from e

        version = {10: "1.0", 11: "1.1"}.get(getattr(raw.raw, 'version', 11), "1.1")
        return Response(
            status_code=raw.status_code,
            reason=raw.reason or "",
            http_version=version,
            headers=raw.headers,
            url=raw.url,
            chunks=chunks(),
            close=raw.close,
            abort=lambda: _shutdown_socket(_requests_socket(raw)),
            deadline=deadline,
            timeout=timeout,
        )

    # ==================== HTTP/2 (httpx) ====================

    def _send_http2(self, request: Request) -> Response:
        timeout = self._timeout_for(request)
        deadline = time.monotonic() + timeout

        try:
            with request.open_payload() as (data, files):
                prepared = self._session.build_request(
                    method=request.method.value,
                    url=request.url,
                    headers=_latin1_headers(request.headers),
                    content=data,
                    files=files,
                    timeout=timeout,
                )
                raw = self._session.send(
                    prepared,
                    stream=True,
                    follow_redirects=self._options.allow_redirects,
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise classify_httpx_exception(e, request.url, timeout) from e

        _check_deadline(deadline, raw.close, request.url, timeout)

        def chunks():
            try:
                yield from raw.iter_bytes(chunk_size=CHUNK_SIZE)
            except httpx.HTTPError as e:
                raise classify_httpx_exception(e, request.url, timeout) from e

        version = raw.http_version.replace("HTTP/", "") if raw.http_version else "2"
        return Response(
            status_code=raw.status_code,
            reason=raw.reason_phrase or "",
            http_version=version,
            headers=raw.headers,
            url=str(raw.url),
            chunks=chunks(),
            close=raw.close,
            abort=lambda: _shutdown_socket(_httpx_socket(raw)),
            deadline=deadline,
            timeout=timeout,
        )


def _latin1_headers(headers: Mapping[str, str]) -> List[Tuple[bytes, bytes]]:
    """Заголовки байтами, как их кодирует requests (httpx по умолчанию берёт ASCII)."""
    return [(key.encode('ascii'), value.encode('latin-1')) for key, value in headers.items()]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# DEADLINE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _check_deadline(deadline: float, close: Callable[[], None], url: str, timeout: float) -> None:
    """Заголовки пришли после дедлайна: закрыть ответ и выбросить TimeoutError."""
    if time.monotonic() > deadline:
        close()
        raise TimeoutError("Request timeout", url, timeout)


def _requests_socket(raw: requests.Response) -> Optional[socket.socket]:
    connection = getattr(raw.raw, 'connection', None)
    return getattr(connection, 'sock', None)


def _httpx_socket(raw: httpx.Response) -> Optional[socket.socket]:
    stream = raw.extensions.get('network_stream')
    if stream is None:
        return None
    return stream.get_extra_info('socket')


def _shutdown_socket(sock: Optional[socket.socket]) -> None:
    """
    Разбудить поток, заблокированный в чтении тела.

    Вызывается из потока таймера: recv() на сокете возвращает EOF или ошибку,
    и Response.iter_bytes() превращает это в TimeoutError.
    """
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # сокет уже закрыт
        pass


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# FACTORY
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _create_requests_session(options: ClientOptions) -> requests.Session:
    """Create configured requests session."""
    session = requests.Session()

    # Ретраев нет: один запрос за запуск
    adapter = HTTPAdapter(max_retries=0)
    session.mount('http://', adapter)
    session.mount('https://', adapter)

    session.headers['User-Agent'] = options.user_agent

    if options.proxy:
        session.proxies.update({'http': options.proxy, 'https': options.proxy})
        # прокси из конфигурации важнее переменных окружения
        session.trust_env = False

    return session


def _create_httpx_client(options: ClientOptions) -> httpx.Client:
    """Create httpx client that speaks HTTP/2 only."""
    try:
        transport = httpx.HTTPTransport(http1=False, http2=True, proxy=options.proxy, retries=0)
    except ImportError as e:
        # h2 не установлен
        raise ConfigError(f"HTTP/2 support is unavailable: {e}")

    return httpx.Client(
        transport=transport,
        headers={'User-Agent': options.user_agent},
        timeout=options.timeout,
        follow_redirects=options.allow_redirects,
    )


_SESSION_FACTORIES = {
    TransportKind.HTTP1: _create_requests_session,
    TransportKind.HTTP2: _create_httpx_client,
}


def build_client(
    config: RequestConfig,
    settings: Optional['RqSettings'] = None,
    logger: Optional['RqLogger'] = None,
) -> Client:
    """
    Построить клиент из конфигурации запроса.

    Args:
        config: Конфигурация запроса
        settings: Настройки окружения (дефолтные User-Agent, прокси, таймаут)
        logger: Логгер

    Returns:
        Client instance

    Raises:
        ConfigError: Невалидный прокси или таймаут

    Example:
        >>> config = RequestConfig(url="https://example.com", http2_only=True)
        >>> with build_client(config) as client:
        ...     print(client.options.transport)
    """
    user_agent = config.user_agent or (settings.user_agent if settings else None) or default_user_agent()
    proxy = config.proxy or (settings.proxy if settings else None)
    timeout = settings.default_timeout if settings else DEFAULT_TIMEOUT

    options = ClientOptions(
        user_agent=user_agent,
        timeout=timeout,
        allow_redirects=config.allow_redirects,
        http2_only=config.http2_only,
        proxy=proxy,
    )

    try:
        client = Client(options)
    except RqError:
        raise
    except ValueError as e:
        # requests/httpx отвергли прокси
        raise ConfigError(f"invalid proxy {proxy!r}: {e}")

    if logger:
        logger.debug(
            "Client built",
            transport=options.transport.value,
            proxy=options.proxy,
            allow_redirects=options.allow_redirects,
            user_agent=options.user_agent,
        )

    return client
