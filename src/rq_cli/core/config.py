"""
Модель конфигурации одного запуска rq.

Все конфиги immutable (frozen dataclasses): конфигурация собирается один раз
из аргументов командной строки и дальше только читается.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP METHOD
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HttpMethod(str, Enum):
    """Поддерживаемые HTTP методы."""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @classmethod
    def resolve(cls, token: Optional[str]) -> "HttpMethod":
        """
        Сопоставить токен методу без учёта регистра.

        Неизвестный или пустой токен - это GET, а не ошибка.

        Examples:
            >>> HttpMethod.resolve("post")
            <HttpMethod.POST: 'POST'>
            >>> HttpMethod.resolve("PUR")
            <HttpMethod.GET: 'GET'>
        """
        if not token:
            return cls.GET
        return _METHODS.get(token.strip().upper(), cls.GET)

_METHODS = {method.value: method for method in HttpMethod}

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SOURCES
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class InlineSource:
    """Значение, заданное прямо в командной строке."""
    value: str

@dataclass(frozen=True)
class FileSource:
    """Ссылка на файл (`@path`)."""
    path: Path

Source = Union[InlineSource, FileSource]

def parse_source(raw: str) -> Source:
    """
    Разобрать значение флага: `@path` - файл, всё остальное - literal.

    Examples:
        >>> parse_source("@headers.json")
        FileSource(path=PosixPath('headers.json'))
        >>> parse_source("X-Token=abc")
        InlineSource(value='X-Token=abc')
    """
    if raw.startswith("@") and len(raw) > 1:
        return FileSource(Path(raw[1:]).expanduser())
    return InlineSource(raw)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# AUTH
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class AuthConfig:
    """
    Аутентификация.

    Args:
        basic: `user:pass` для Basic auth
        bearer: Bearer токен

    Оба могут быть заданы: basic применяется первым, bearer перезаписывает
    Authorization.
    """
    basic: Optional[str] = None
    bearer: Optional[str] = None

    def __repr__(self) -> str:
        basic = "'***'" if self.basic else None
        bearer = "'***'" if self.bearer else None
        return f"AuthConfig(basic={basic}, bearer={bearer})"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RequestConfig:
    """
    Конфигурация одного запроса.

    Args:
        url: Целевой URL
        method: Токен метода (разрешается в HttpMethod при сборке запроса)
        auth: Аутентификация
        headers: Источники заголовков в порядке объявления
        cookies: Источник Cookie заголовка
        body: Источник тела запроса
        form: JSON объект с полями multipart формы
        proxy: URL прокси
        allow_redirects: Следовать редиректам
        http2_only: Только HTTP/2
        timeout_seconds: Таймаут запроса (сек)
        user_agent: User-Agent вместо дефолтного
        download_path: Сохранить тело ответа в файл
        pretty_print: Переформатировать JSON ответ
        verbose: Печатать метаданные запроса и ответа
        debug: Собрать и напечатать запрос, не отправляя

    Examples:
        >>> RequestConfig(url="https://example.com")
        >>> RequestConfig.create("https://example.com", method="post", data="@body.json")
    """
    url: str
    method: str = "GET"
    auth: AuthConfig = field(default_factory=AuthConfig)
    headers: Tuple[Source, ...] = ()
    cookies: Optional[Source] = None
    body: Optional[Source] = None
    form: Optional[str] = None
    proxy: Optional[str] = None
    allow_redirects: bool = True
    http2_only: bool = False
    timeout_seconds: Optional[int] = None
    user_agent: Optional[str] = None
    download_path: Optional[Path] = None
    pretty_print: bool = False
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Валидация и заморозка последовательностей."""
        if not isinstance(self.headers, tuple):
            object.__setattr__(self, 'headers', tuple(self.headers))
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout must be positive")

    @classmethod
    def create(
        cls,
        url: str,
        method: Optional[str] = None,
        basic: Optional[str] = None,
        bearer: Optional[str] = None,
        headers: Optional[Sequence[str]] = None,
        cookies: Optional[str] = None,
        data: Optional[str] = None,
        form: Optional[str] = None,
        download: Optional[str] = None,
        **kwargs
    ) -> 'RequestConfig':
        """
        Удобный конструктор из сырых значений флагов.

        Args:
            url: Целевой URL
            method: Токен метода (None = GET)
            basic: `user:pass`
            bearer: Bearer токен
            headers: Список `Key=Value` или `@file`
            cookies: Строка cookies или `@file`
            data: Тело запроса или `@file`
            form: JSON объект multipart формы
            download: Путь для сохранения ответа
            **kwargs: Остальные поля RequestConfig как есть

        Returns:
            RequestConfig instance

        Examples:
            >>> config = RequestConfig.create(
            ...     "https://api.example.com/items",
            ...     method="POST",
            ...     headers=["Accept=application/json", "@extra.json"],
            ...     bearer="tok123",
            ... )
        """
        return cls(
            url=url,
            method=method or "GET",
            auth=AuthConfig(basic=basic, bearer=bearer),
            headers=tuple(parse_source(h) for h in (headers or ())),
            cookies=parse_source(cookies) if cookies is not None else None,
            body=parse_source(data) if data is not None else None,
            form=form,
            download_path=Path(download).expanduser() if download else None,
            **kwargs
        )
