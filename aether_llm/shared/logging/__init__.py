"""Модуль структурированного логирования.

Основное использование:
    >>> from aether_llm.shared.logging import setup_logging, get_logger
    >>> setup_logging()  # Вызвать один раз при старте
    >>> logger = get_logger()
    >>> logger.info("Task executed", task_type="translate")
"""

from aether_llm.shared.logging.config import (
    InterceptHandler,
    configure_third_party_loggers,
    get_logger,
    setup_logging,
    trace_id_patcher,
)
from aether_llm.shared.logging.formatters import json_formatter, sanitize_sensitive_data

__all__ = [
    "InterceptHandler",
    "configure_third_party_loggers",
    "get_logger",
    "json_formatter",
    "sanitize_sensitive_data",
    "setup_logging",
    "trace_id_patcher",
]
