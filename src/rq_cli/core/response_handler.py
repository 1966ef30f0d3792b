# src/rq_cli/core/response_handler.py
"""
Response Handler.

Рендерит ответ, по приоритету: скачивание в файл, JSON pretty-print, сырой
текст. В verbose режиме перед телом печатаются статус и заголовки.
"""

import json
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO

from .config import RequestConfig
from .exceptions import OutputError
from .models import Response

if TYPE_CHECKING:
    from .logging import RqLogger


def print_metadata(response: Response, out: TextIO) -> None:
    """
    Статусная строка и все заголовки ответа.

    Example output:
        HTTP/1.1 200 OK
        Content-Type: application/json
        Content-Length: 17

    """
    print(response.status_line, file=out)
    for key, value in response.headers.items():
        print(f"{key}: {value}", file=out)
    print(file=out)


def pretty_json(text: str) -> Optional[str]:
    """
    Переформатировать JSON с отступами.

    Returns:
        Отформатированный JSON или None, если текст не JSON

    Examples:
        >>> print(pretty_json('{"a":[1,2]}'))
        {
          "a": [
            1,
            2
          ]
        }
        >>> pretty_json("<html>") is None
        True
    """
    try:
        data = json.loads(text)
    except ValueError:
        return None
    return json.dumps(data, indent=2, ensure_ascii=False)


def download(response: Response, path: Path) -> int:
    """
    Download response body with streaming to avoid memory issues.

    Args:
        response: Response to read
        path: Path to save file

    Returns:
        Total bytes written

    Raises:
        OutputError: File cannot be written (partial file is removed)
    """
    written = 0
    try:
        with open(path, 'wb') as f:
            for chunk in response.iter_bytes():
                f.write(chunk)
                written += len(chunk)
    except OSError as e:
        _remove_partial(path)
        raise OutputError(str(path), e.strerror or str(e))
    except Exception:
        # Clean up partial file
        _remove_partial(path)
        raise

    return written


def _remove_partial(path: Path) -> None:
    if os.path.exists(path):
        os.remove(path)


def write_text(text: str, out: TextIO) -> None:
    out.write(text)
    if text and not text.endswith("\n"):
        out.write("\n")


def handle_response(
    response: Response,
    config: RequestConfig,
    out: Optional[TextIO] = None,
    logger: Optional['RqLogger'] = None,
) -> None:
    """
    Отрендерить ответ.

    Args:
        response: Ответ
        config: Конфигурация запроса (download_path, pretty_print, verbose)
        out: Поток вывода (по умолчанию stdout)
        logger: Логгер

    Raises:
        OutputError: Не удалось записать файл скачивания
    """
    out = out or sys.stdout

    if config.verbose:
        print_metadata(response, out)

    if config.download_path is not None:
        written = download(response, config.download_path)
        if logger:
            logger.info("Download saved", path=str(config.download_path), bytes=written)
        return

    text = response.text

    if config.pretty_print:
        formatted = pretty_json(text)
        if formatted is None:
            if logger:
                logger.debug("Response is not JSON, printing raw body",
                             content_type=response.headers.get("Content-Type"))
            write_text(text, out)
        else:
            write_text(formatted, out)
        return

    write_text(text, out)
