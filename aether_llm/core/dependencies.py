"""Aether LLM - Dependencies.

Dependency Injection для FastAPI. В тестах подменяется через
app.dependency_overrides.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from aether_llm.core.config import Settings, settings
from aether_llm.providers.discovery import ModelDiscovery
from aether_llm.providers.store import ProviderStore
from aether_llm.services.llm_service import LLMService
from aether_llm.services.task_executor import TaskExecutor

# ==================== Configuration Dependencies ====================


def get_settings() -> Settings:
    """Предоставляет application settings.

    Returns:
        Settings instance.

    """
    return settings


# ==================== Service Dependencies ====================


@lru_cache
def get_provider_store() -> ProviderStore:
    """Предоставляет ProviderStore (singleton на процесс).

    Returns:
        ProviderStore для файла из настроек.

    """
    return ProviderStore(settings.storage.config_path)


def get_task_executor(store: Annotated[ProviderStore, Depends(get_provider_store)]) -> TaskExecutor:
    """Предоставляет TaskExecutor.

    Args:
        store: Хранилище провайдеров.

    Returns:
        TaskExecutor instance.

    """
    return TaskExecutor(store, timeout=settings.http.timeout_seconds)


def get_model_discovery() -> ModelDiscovery:
    """Предоставляет ModelDiscovery.

    Returns:
        ModelDiscovery instance.

    """
    return ModelDiscovery(timeout=settings.http.timeout_seconds)


def get_llm_service(
    store: Annotated[ProviderStore, Depends(get_provider_store)],
    executor: Annotated[TaskExecutor, Depends(get_task_executor)],
) -> LLMService:
    """Предоставляет LLMService.

    Returns:
        LLMService instance.

    """
    return LLMService(store, executor)


# ==================== Type Aliases ====================
# Используются для более чистого кода в route handlers

SettingsDep = Annotated[Settings, Depends(get_settings)]
ProviderStoreDep = Annotated[ProviderStore, Depends(get_provider_store)]
TaskExecutorDep = Annotated[TaskExecutor, Depends(get_task_executor)]
ModelDiscoveryDep = Annotated[ModelDiscovery, Depends(get_model_discovery)]
LLMServiceDep = Annotated[LLMService, Depends(get_llm_service)]
