# src/rq_cli/core/request_builder.py
"""
Request Builder.

Превращает RequestConfig в неизменяемый Request. Шаги выполняются строго по
порядку, и первая ошибка прерывает сборку: частично собранный запрос наружу не
выходит. Более поздние шаги перезаписывают результат более ранних (bearer
поверх basic, форма поверх тела).
"""

import base64
import json
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple, Union
from urllib.parse import urlsplit

from .client import Client
from .config import AuthConfig, FileSource, HttpMethod, InlineSource, RequestConfig, Source
from .exceptions import (
    BadHeaderValueError,
    FormError,
    HeaderEncodingError,
    HeaderFileError,
    InvalidURLError,
    MalformedAuthError,
    MalformedHeaderError,
    MissingFileError,
)
from .models import FilePart, MultipartField, Request, TextPart

if TYPE_CHECKING:
    from .logging import RqLogger


def resolve_url(url: str) -> str:
    """
    Проверить, что URL абсолютный.

    Raises:
        InvalidURLError: Нет схемы http(s) или хоста

    Examples:
        >>> resolve_url("https://example.com/items?page=2")
        'https://example.com/items?page=2'
    """
    try:
        parts = urlsplit(url.strip())
        parts.port  # ValueError на невалидном порте
    except ValueError as e:
        raise InvalidURLError(url, str(e))

    if parts.scheme.lower() not in ('http', 'https'):
        raise InvalidURLError(url, "missing or unsupported scheme")
    if not parts.hostname:
        raise InvalidURLError(url, "missing host")

    return url.strip()


def parse_inline_header(raw: str) -> Tuple[str, str]:
    """
    Разобрать `Key=Value` по первому `=`.

    Examples:
        >>> parse_inline_header("X-Query=a=b")
        ('X-Query', 'a=b')
    """
    key, sep, value = raw.partition('=')
    key = key.strip()
    if not sep or not key:
        raise MalformedHeaderError(raw)
    return key, value.strip()


def load_header_file(path: Path) -> Dict[str, str]:
    """
    Загрузить заголовки из JSON файла.

    Файл должен содержать JSON объект, все значения которого - строки.

    Raises:
        HeaderFileError: Файл не читается, не JSON или не объект
        BadHeaderValueError: Значение не строка
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise HeaderFileError(str(path), e.strerror or str(e))
    except UnicodeDecodeError as e:
        raise HeaderFileError(str(path), f"not UTF-8: {e.reason}")
    except json.JSONDecodeError as e:
        raise HeaderFileError(str(path), f"invalid JSON: {e}")

    if not isinstance(data, dict):
        raise HeaderFileError(str(path), f"expected a JSON object, got {type(data).__name__}")

    for key, value in data.items():
        if not isinstance(value, str):
            raise BadHeaderValueError(str(path), key, value)

    return data


def assemble_headers(sources: Tuple[Source, ...]) -> Dict[str, str]:
    """
    Собрать заголовки в порядке объявления.

    Поздние источники перезаписывают ранние с тем же именем (с учётом
    регистра), независимо от того, inline это или файл.
    """
    headers: Dict[str, str] = {}
    for source in sources:
        if isinstance(source, FileSource):
            headers.update(load_header_file(source.path))
        else:
            key, value = parse_inline_header(source.value)
            headers[key] = value
    return headers


def read_cookies(source: Source) -> str:
    """
    Значение Cookie заголовка.

    Inline строка берётся как есть. Файл читается целиком как сырые байты без
    разбора и декодируется как Latin-1, так что на провод уходят ровно те байты,
    что лежат в файле; отбрасывается только завершающий перевод строки.
    """
    if isinstance(source, InlineSource):
        return source.value

    try:
        with open(source.path, 'rb') as f:
            text = f.read().decode('latin-1')
    except FileNotFoundError:
        raise MissingFileError(str(source.path), "cookie file")
    except OSError as e:
        raise MissingFileError(str(source.path), f"cookie file ({e.strerror})")

    if text.endswith('\r\n'):
        return text[:-2]
    if text.endswith('\n'):
        return text[:-1]
    return text


def basic_auth_header(credentials: str) -> str:
    """
    Authorization значение для Basic auth.

    Examples:
        >>> basic_auth_header("alice:secret")
        'Basic YWxpY2U6c2VjcmV0'
    """
    user, sep, password = credentials.partition(':')
    if not sep:
        raise MalformedAuthError()
    token = base64.b64encode(f"{user}:{password}".encode('utf-8')).decode('ascii')
    return f"Basic {token}"


def apply_auth(headers: Dict[str, str], auth: AuthConfig) -> None:
    """Basic, затем Bearer: bearer перезаписывает Authorization."""
    if auth.basic is not None:
        headers['Authorization'] = basic_auth_header(auth.basic)
    if auth.bearer is not None:
        headers['Authorization'] = f"Bearer {auth.bearer}"


def check_header_encoding(headers: Dict[str, str]) -> None:
    """
    Проверить, что заголовки можно отправить: имя - ASCII, значение - Latin-1.

    Raises:
        HeaderEncodingError: Символ вне допустимой кодировки
    """
    for key, value in headers.items():
        try:
            key.encode('ascii')
            value.encode('latin-1')
        except UnicodeEncodeError:
            raise HeaderEncodingError(key)


def resolve_body(source: Source) -> Union[str, Path]:
    """
    Тело запроса: literal строка или существующий файл для стриминга.

    Raises:
        MissingFileError: Файл не существует
    """
    if isinstance(source, InlineSource):
        return source.value
    if not source.path.is_file():
        raise MissingFileError(str(source.path), "body file")
    return source.path


def parse_form(form: str, logger: Optional['RqLogger'] = None) -> List[MultipartField]:
    """
    Разобрать JSON описание multipart формы.

    Строковое значение, указывающее на существующий файл, становится файловой
    частью, любое другое строковое значение - текстовой. Нестроковые значения
    пропускаются.

    Raises:
        FormError: Не JSON или не объект

    Example:
        >>> parse_form('{"file": "/tmp/exists.txt", "note": "hello"}')
        [FilePart(name='file', path=PosixPath('/tmp/exists.txt')), TextPart(name='note', value='hello')]
    """
    try:
        data = json.loads(form)
    except json.JSONDecodeError as e:
        raise FormError(f"invalid form JSON: {e}")

    if not isinstance(data, dict):
        raise FormError(f"form must be a JSON object, got {type(data).__name__}")

    fields: List[MultipartField] = []
    for name, value in data.items():
        if not isinstance(value, str):
            if logger:
                logger.debug("Skipping non-string form field", field=name, type=type(value).__name__)
            continue

        path = Path(value).expanduser()
        if path.is_file():
            fields.append(FilePart(name=name, path=path))
        else:
            fields.append(TextPart(name=name, value=value))

    return fields


def build_request(
    config: RequestConfig,
    client: Client,
    logger: Optional['RqLogger'] = None,
) -> Request:
    """
    Собрать запрос из конфигурации.

    Args:
        config: Конфигурация запроса
        client: Клиент, через который запрос будет отправлен
        logger: Логгер

    Returns:
        Неизменяемый Request

    Raises:
        BuildError: Первая ошибка сборки (URL, заголовки, auth, файлы, форма)

    Example:
        >>> config = RequestConfig.create("https://example.com", method="post", data="hello")
        >>> with build_client(config) as client:
        ...     request = build_request(config, client)
        >>> request.method
        <HttpMethod.POST: 'POST'>
    """
    url = resolve_url(config.url)
    method = HttpMethod.resolve(config.method)

    headers = assemble_headers(config.headers)

    if config.cookies is not None:
        headers['Cookie'] = read_cookies(config.cookies)

    apply_auth(headers, config.auth)
    check_header_encoding(headers)

    body = resolve_body(config.body) if config.body is not None else None

    multipart: List[MultipartField] = []
    if config.form is not None:
        multipart = parse_form(config.form, logger)
        # форма заменяет тело
        body = None

    timeout = float(config.timeout_seconds) if config.timeout_seconds is not None else None

    request = Request(
        method=method,
        url=url,
        headers=headers,
        body=body,
        multipart=tuple(multipart),
        timeout=timeout,
    )

    if logger:
        logger.debug(
            "Request built",
            method=method.value,
            url=url,
            headers=dict(headers),
            body_file=str(body) if isinstance(body, Path) else None,
            multipart_fields=[part.name for part in multipart],
            timeout=timeout if timeout is not None else client.options.timeout,
        )

    return request
