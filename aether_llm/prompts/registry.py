"""Prompt Registry - выбор промптов по типу задачи."""

from typing import Any

from aether_llm.core.enums import TaskType
from aether_llm.prompts.base import TaskPrompt
from aether_llm.prompts.tasks import (
    CustomPrompt,
    GreetingPrompt,
    ScorePrompt,
    SegmentAlignPrompt,
    SegmentPrompt,
    TranslatePrompt,
)
from aether_llm.shared.errors import UnknownTaskTypeError


def get_task_prompt(task_type: str) -> TaskPrompt:
    """Получить промпты для типа задачи.

    Args:
        task_type: Идентификатор задачи (например, "segment-align")

    Returns:
        TaskPrompt для задачи

    Raises:
        UnknownTaskTypeError: Если тип задачи не зарегистрирован
    """
    try:
        kind = TaskType(task_type)
    except ValueError as e:
        raise UnknownTaskTypeError(task_type) from e

    match kind:
        case TaskType.SEGMENT:
            return SegmentPrompt()
        case TaskType.SEGMENT_ALIGN:
            return SegmentAlignPrompt()
        case TaskType.TRANSLATE:
            return TranslatePrompt()
        case TaskType.SCORE:
            return ScorePrompt()
        case TaskType.GREETING:
            return GreetingPrompt()
        case TaskType.CUSTOM:
            return CustomPrompt()


def build_system_prompt(task_type: str, params: dict[str, Any]) -> str:
    """System prompt для задачи."""
    return get_task_prompt(task_type).system_prompt(params)


def build_user_message(task_type: str, params: dict[str, Any]) -> str:
    """User message для задачи."""
    return get_task_prompt(task_type).user_message(params)


def parse_task_response(task_type: str, raw: Any) -> Any:
    """Разобрать JSON ответ модели в результат задачи."""
    return get_task_prompt(task_type).parse_response(raw)
