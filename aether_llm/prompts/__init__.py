"""Prompt Registry для LLM задач."""

from aether_llm.prompts.base import TaskPrompt, time_of_day
from aether_llm.prompts.registry import (
    build_system_prompt,
    build_user_message,
    get_task_prompt,
    parse_task_response,
)

__all__ = [
    "TaskPrompt",
    "build_system_prompt",
    "build_user_message",
    "get_task_prompt",
    "parse_task_response",
    "time_of_day",
]
