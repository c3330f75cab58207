"""Aether LLM - Core module.

Ядро приложения: конфигурация, константы, перечисления.
"""

from aether_llm.core.config import settings
from aether_llm.core.constants import API_PREFIX, APP_VERSION, SERVICE_NAME

__all__ = [
    "settings",
    "API_PREFIX",
    "APP_VERSION",
    "SERVICE_NAME",
]
