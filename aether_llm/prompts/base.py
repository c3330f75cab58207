"""Базовый класс промптов задач.

Strategy Pattern: каждый тип задачи определяет system prompt,
user message и разбор JSON ответа модели.
"""

from abc import ABC, abstractmethod
from typing import Any

from aether_llm.core.enums import TaskType, TimeOfDay


class TaskPrompt(ABC):
    """Промпты и парсер ответа для одного типа задачи.

    Разбор ответа тотален: любой JSON (None, список, скаляр, объект
    с отсутствующими или неверно типизированными полями) даёт
    результат со значениями по умолчанию, а не исключение.
    """

    task_type: TaskType

    @abstractmethod
    def system_prompt(self, params: dict[str, Any]) -> str:
        """Построить system prompt.

        Args:
            params: Параметры задачи

        Returns:
            Текст system сообщения
        """

    @abstractmethod
    def user_message(self, params: dict[str, Any]) -> str:
        """Построить user message.

        Args:
            params: Параметры задачи

        Returns:
            Текст user сообщения
        """

    @abstractmethod
    def parse_response(self, raw: Any) -> Any:
        """Привести разобранный JSON ответ к результату задачи.

        Args:
            raw: Любое JSON значение

        Returns:
            Структурированный результат задачи
        """


def param_str(params: dict[str, Any], key: str, default: str = "") -> str:
    """Строковый параметр задачи; пустое или отсутствующее значение даёт default."""
    value = params.get(key)
    if value is None or value == "":
        return default
    return str(value)


def as_object(raw: Any) -> dict[str, Any]:
    """JSON объект или пустой dict для любого другого значения."""
    return raw if isinstance(raw, dict) else {}


def string_value(value: Any) -> str:
    return value if isinstance(value, str) else ""


def string_list(value: Any) -> list[str]:
    """Строковые элементы списка; не-список даёт []."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def time_of_day(hour: int) -> TimeOfDay:
    """Время суток по часу (0-23).

    [5,12) - утро, [12,17) - день, [17,21) - вечер, остальное - ночь.
    """
    if 5 <= hour < 12:
        return TimeOfDay.MORNING
    if 12 <= hour < 17:
        return TimeOfDay.AFTERNOON
    if 17 <= hour < 21:
        return TimeOfDay.EVENING
    return TimeOfDay.NIGHT
