"""Logging configuration.

Настройка логирования через Loguru:
- Loguru для собственных логов приложения
- Перехват логов сторонних библиотек (uvicorn, fastapi, httpx)
- trace_id текущего запроса в каждой записи
"""

import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from aether_llm.core.config import Settings, settings
from aether_llm.shared.errors.context import trace_id_var
from aether_llm.shared.logging.formatters import TEXT_FORMAT, json_formatter


class InterceptHandler(logging.Handler):
    """Обработчик для перехвата логов стандартной библиотеки logging."""

    def emit(self, record: logging.LogRecord) -> None:
        """Перехват и отправка логов в Loguru.

        Args:
            record: Запись лога из стандартного logging.

        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Глубина стека, чтобы Loguru показывал реальное место вызова
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def trace_id_patcher(record: Any) -> None:
    """Добавить trace_id в запись лога.

    Args:
        record: Запись лога.

    """
    record["extra"].setdefault("trace_id", trace_id_var.get() or "no-trace")


def setup_logging(config: Settings | None = None) -> None:
    """Настроить логирование приложения.

    Args:
        config: Настройки приложения (по умолчанию глобальные).

    """
    config = config or settings
    log = config.log

    logger.remove()
    logger.configure(patcher=trace_id_patcher)

    if log.format == "json":
        logger.add(
            sys.stdout,
            format=json_formatter,
            level=log.level,
            colorize=False,
            backtrace=True,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stdout,
            format=TEXT_FORMAT,
            level=log.level,
            colorize=True,
            backtrace=True,
            diagnose=config.debug,
        )

    if log.file_path:
        Path(log.file_path).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log.file_path,
            format=json_formatter,  # Файл всегда в JSON
            level=log.level,
            rotation=log.rotation,
            retention=log.retention,
            compression="zip",
            backtrace=True,
            diagnose=False,
        )

    configure_third_party_loggers()

    logger.info(
        "Logger initialized",
        level=log.level,
        format=log.format,
        file=log.file_path,
    )


def configure_third_party_loggers() -> None:
    """Перенаправить логи сторонних библиотек в Loguru."""
    loggers_to_intercept = [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "fastapi",
        "httpx",
        "httpcore",
    ]

    for logger_name in loggers_to_intercept:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False

    # httpx пишет каждый запрос в INFO, а URL содержит base_url провайдера
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> Any:
    """Получить настроенный logger instance.

    Args:
        name: Имя логгера (обычно __name__ модуля)

    Returns:
        Loguru logger
    """
    if name:
        return logger.bind(logger_name=name)
    return logger
