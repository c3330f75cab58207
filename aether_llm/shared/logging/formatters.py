"""Форматтеры логов для Loguru.

- JSON формат для prod (structured logging с trace_id)
- Human-readable формат для локальной разработки
- Маскирование credentials (API ключи провайдеров)
"""

import re
from typing import Any

import orjson

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "trace_id=<yellow>{extra[trace_id]}</yellow> - "
    "<level>{message}</level>"
)

SENSITIVE_KEYS = frozenset({"api_key", "apikey", "authorization", "password", "secret", "token"})

SENSITIVE_PATTERNS = [
    (re.compile(r'"(api_?key|secret|token|password)"\s*:\s*"[^"]*"', re.IGNORECASE), r'"\1": "***"'),
    (re.compile(r"(Bearer)\s+[A-Za-z0-9._\-]+", re.IGNORECASE), r"\1 ***"),
    (re.compile(r"(api_?key|secret|token|password)=\S+", re.IGNORECASE), r"\1=***"),
]


def sanitize_sensitive_data(text: str) -> str:
    """Удалить чувствительные данные из строки.

    Args:
        text: Текст для sanitization

    Returns:
        Текст с замаскированными ключами и токенами
    """
    for pattern, replacement in SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def _redact(key: str, value: Any) -> Any:
    if key.lower().replace("-", "_") in SENSITIVE_KEYS:
        return "***REDACTED***"
    return value


def json_formatter(record: dict[str, Any]) -> str:
    """JSON форматтер для structured logging.

    Loguru ожидает от format-функции шаблон, поэтому готовая JSON строка
    кладётся в record["extra"]["serialized"], а возвращается ссылка на неё.

    Args:
        record: Loguru record dictionary

    Returns:
        Шаблон формата для Loguru
    """
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
        "message": sanitize_sensitive_data(record["message"]),
    }

    for key, value in record["extra"].items():
        if key == "serialized":
            continue
        log_entry[key] = _redact(key, value)

    exception = record["exception"]
    if exception is not None:
        log_entry["exception"] = {
            "type": exception.type.__name__ if exception.type else None,
            "value": str(exception.value) if exception.value else None,
        }

    record["extra"]["serialized"] = orjson.dumps(log_entry, default=str).decode("utf-8")
    return "{extra[serialized]}\n"
