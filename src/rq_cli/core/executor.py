# src/rq_cli/core/executor.py
"""
Executor.

Отправляет запрос ровно один раз или, в debug режиме, только печатает его.
"""

import sys
import time
from typing import TYPE_CHECKING, Optional, TextIO

from requests.sessions import merge_setting
from requests.structures import CaseInsensitiveDict

from .client import Client
from .exceptions import RqError
from .models import Request, Response

if TYPE_CHECKING:
    from .logging import RqLogger


def effective_headers(client: Client, request: Request) -> CaseInsensitiveDict:
    """Заголовки клиента, поверх которых наложены заголовки запроса (так их сливает requests)."""
    return merge_setting(dict(request.headers), dict(client.headers), dict_class=CaseInsensitiveDict)


def dump_request(client: Client, request: Request, stream: TextIO) -> None:
    """
    Печатает метод, URL, заголовки и таймаут запроса.

    Example output:
        > GET https://example.com/items
        > User-Agent: rq-cli/1.0.0
        > Accept: application/json
        > timeout: 5s
    """
    print(f"> {request.method.value} {request.url}", file=stream)
    for key, value in effective_headers(client, request).items():
        print(f"> {key}: {value}", file=stream)
    if request.is_multipart:
        fields = ", ".join(part.name for part in request.multipart)
        print(f"> multipart: {fields}", file=stream)
    elif request.body is not None:
        print(f"> body: {request.body if isinstance(request.body, str) else '@' + str(request.body)}", file=stream)
    if request.timeout is not None:
        print(f"> timeout: {request.timeout:g}s", file=stream)
    print(">", file=stream)


def execute(
    client: Client,
    request: Request,
    debug: bool = False,
    verbose: bool = False,
    stream: Optional[TextIO] = None,
    logger: Optional['RqLogger'] = None,
) -> Optional[Response]:
    """
    Выполнить запрос.

    Args:
        client: Клиент
        request: Собранный запрос
        debug: Только напечатать запрос, не отправляя
        verbose: Напечатать запрос перед отправкой
        stream: Диагностический поток (по умолчанию stderr)
        logger: Логгер

    Returns:
        Response, или None в debug режиме

    Raises:
        TransportError: Сетевая ошибка
        TimeoutError: Истёк таймаут

    Note:
        Не-2xx статус - не ошибка: печатается одна диагностическая строка,
        ответ возвращается как обычно.
    """
    stream = stream or sys.stderr

    if debug or verbose:
        dump_request(client, request, stream)

    if debug:
        if logger:
            logger.info("Debug mode, request not sent", method=request.method.value, url=request.url)
        return None

    if logger:
        logger.info(
            "Request started",
            method=request.method.value,
            url=request.url,
            transport=client.options.transport.value,
            timeout=request.timeout if request.timeout is not None else client.options.timeout,
        )

    start_time = time.time()
    try:
        response = client.send(request)
    except RqError as e:
        if logger:
            logger.error(
                "Request failed",
                method=request.method.value,
                url=request.url,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.time() - start_time) * 1000, 2),
            )
        raise

    if logger:
        logger.info(
            "Request completed",
            method=request.method.value,
            url=request.url,
            status_code=response.status_code,
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )

    if not response.ok:
        status = f"{response.status_code} {response.reason}".rstrip()
        print(f"warning: HTTP {status} for {response.url}", file=stream)

    return response
