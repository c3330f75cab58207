"""LLM Providers - конфигурация, хранение и обнаружение моделей."""

from aether_llm.providers.base import (
    LLMSettings,
    ModelListResult,
    ModelParams,
    ModelSelection,
    PartialModelParams,
    ProviderConfig,
    TaskModelConfig,
    TaskRequest,
    TaskResult,
    TaskUsage,
)
from aether_llm.providers.discovery import ModelDiscovery, filter_text_models
from aether_llm.providers.store import ProviderStore, mask_api_key, merge_model_params

__all__ = [
    "LLMSettings",
    "ModelDiscovery",
    "ModelListResult",
    "ModelParams",
    "ModelSelection",
    "PartialModelParams",
    "ProviderConfig",
    "ProviderStore",
    "TaskModelConfig",
    "TaskRequest",
    "TaskResult",
    "TaskUsage",
    "filter_text_models",
    "mask_api_key",
    "merge_model_params",
]
