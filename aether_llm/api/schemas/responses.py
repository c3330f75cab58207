"""Response Schemas для Aether LLM API."""

from typing import Literal

from pydantic import Field

from aether_llm.providers.base import CamelModel, LLMSettings


class SuccessResponse(CamelModel):
    """Подтверждение операции без данных."""

    success: Literal[True] = True


class ConfigResponse(CamelModel):
    """GET /api/llm/config - настройки с замаскированными ключами."""

    success: Literal[True] = True
    config: LLMSettings


class ModelsResponse(CamelModel):
    """Список text-моделей провайдера."""

    success: Literal[True] = True
    models: list[str] = Field(default_factory=list)


class HealthResponse(CamelModel):
    """GET /health"""

    status: Literal["ok"] = "ok"
    service: str
    version: str
