"""
Куда пишет лог rq.

Два назначения: stderr (stdout занят телом ответа) и файл с ротацией,
заданный через --log-file или RQ_LOG_FILE.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, TypeVar

H = TypeVar('H', bound=logging.Handler)

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5


def _prepare(
    handler: H,
    level: int,
    formatter: logging.Formatter,
    filters: Optional[List[logging.Filter]],
) -> H:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for log_filter in filters or ():
        handler.addFilter(log_filter)
    return handler


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[List[logging.Filter]] = None
) -> logging.StreamHandler:
    """Диагностика в stderr, рядом с warning:/error: строками rq."""
    return _prepare(logging.StreamHandler(sys.stderr), level, formatter, filters)


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    filters: Optional[List[logging.Filter]] = None
) -> RotatingFileHandler:
    """
    Файл лога, общий для всех запусков rq.

    Каждый запуск дописывает в конец; записи одного запуска связывает поле
    run_id. Когда файл дорастает до max_bytes, он уходит в rq.log.1, и так
    хранится не больше backup_count старых файлов.

    Args:
        file_path: Путь к файлу (каталог создаётся при необходимости)
        level: Минимальный уровень записи
        formatter: json, text или colored форматтер
        max_bytes: Порог ротации в байтах
        backup_count: Сколько старых файлов хранить
        filters: Фильтры записей (например, run_id)
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8',
    )
    return _prepare(handler, level, formatter, filters)
