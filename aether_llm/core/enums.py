"""Enums для Aether LLM.

Централизованное хранилище всех enum'ов проекта.
"""

from enum import Enum


class TaskType(str, Enum):
    """Тип LLM задачи (определяет промпты и формат результата)."""

    SEGMENT = "segment"  # Разбиение текста на предложения
    SEGMENT_ALIGN = "segment-align"  # Выравнивание EN/ZH пар
    TRANSLATE = "translate"  # Перевод
    SCORE = "score"  # Оценка перевода пользователя
    GREETING = "greeting"  # Персональные приветствия
    CUSTOM = "custom"  # Промпты от вызывающей стороны


class TimeOfDay(str, Enum):
    """Время суток для приветствий."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class Language(str, Enum):
    """Язык текста для сегментации."""

    EN = "en"
    ZH = "zh"
