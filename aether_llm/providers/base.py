"""Base types для LLM Providers и задач.

Pydantic модели конфигурации провайдеров, параметров генерации,
запросов и результатов задач. JSON (HTTP и файл настроек) использует
camelCase алиасы, Python код - snake_case.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Базовая модель с camelCase алиасами для JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Сериализация в JSON-совместимый dict с camelCase ключами.

        Returns:
            Словарь без незаданных (None) полей
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProviderConfig(CamelModel):
    """Конфигурация OpenAI-compatible провайдера."""

    id: str = Field(min_length=1, description="Уникальный идентификатор провайдера")
    name: str = Field(description="Отображаемое имя")
    base_url: str = Field(description="Base URL API (например, https://api.openai.com/v1)")
    api_key: str = Field(default="", description="Bearer credential")
    is_enabled: bool = Field(default=True, description="Провайдер включён")
    models: list[str] | None = Field(default=None, description="Известные id моделей")


class ModelParams(CamelModel):
    """Параметры генерации (полный набор).

    Следует OpenAI Chat Completions API спецификации.
    """

    temperature: float = Field(default=0.0, ge=0.0, le=2.0, description="Температура генерации")
    top_p: float = Field(default=1.0, ge=0.0, le=1.0, description="Nucleus sampling")
    frequency_penalty: float = Field(default=0.0, ge=-2.0, le=2.0, description="Штраф за частоту токенов")
    presence_penalty: float = Field(default=0.0, ge=-2.0, le=2.0, description="Штраф за присутствие токенов")
    max_tokens: int | None = Field(default=None, ge=1, description="Максимум токенов в ответе")
    seed: int | None = Field(default=None, description="Random seed для воспроизводимости")


class PartialModelParams(CamelModel):
    """Частичные параметры генерации (переопределения задачи или запроса).

    Незаданное поле (None) не переопределяет нижний уровень.
    """

    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    frequency_penalty: float | None = Field(default=None, ge=-2.0, le=2.0)
    presence_penalty: float | None = Field(default=None, ge=-2.0, le=2.0)
    max_tokens: int | None = Field(default=None, ge=1)
    seed: int | None = None


class TaskModelConfig(CamelModel):
    """Переопределение провайдера/модели/параметров для типа задачи."""

    provider_id: str = Field(description="Идентификатор провайдера")
    model_id: str = Field(description="Идентификатор модели")
    params: PartialModelParams | None = Field(default=None, description="Частичные параметры")


class LLMSettings(CamelModel):
    """Корневой документ настроек LLM (хранится в JSON файле)."""

    providers: list[ProviderConfig] = Field(default_factory=list)
    default_params: ModelParams = Field(default_factory=ModelParams)
    default_provider: str | None = None
    default_model: str | None = None
    task_models: dict[str, TaskModelConfig] = Field(default_factory=dict)


class ModelSelection(CamelModel):
    """Пара провайдер/модель, выбранная для задачи."""

    provider_id: str
    model_id: str


class TaskRequest(CamelModel):
    """Запрос на выполнение LLM задачи."""

    task_type: str = Field(description="Тип задачи (segment, translate, ...)")
    provider_id: str = Field(description="Идентификатор провайдера")
    model_id: str = Field(description="Идентификатор модели на стороне провайдера")
    params: dict[str, Any] = Field(default_factory=dict, description="Параметры задачи")
    model_params: PartialModelParams | None = Field(default=None, description="Переопределения генерации")


class TaskUsage(CamelModel):
    """Статистика использования токенов."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class TaskResult(CamelModel):
    """Результат задачи: либо success с data, либо failure с error."""

    success: bool
    data: Any = None
    usage: TaskUsage | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any, usage: TaskUsage | None = None) -> "TaskResult":
        """Успешный результат."""
        return cls(success=True, data=data, usage=usage)

    @classmethod
    def fail(cls, error: str) -> "TaskResult":
        """Неуспешный результат."""
        return cls(success=False, error=error)

    def to_payload(self) -> dict[str, Any]:
        """Тело HTTP ответа.

        data присутствует всегда при success (даже если модель вернула null),
        usage - только если провайдер его сообщил.

        Returns:
            JSON-совместимый словарь
        """
        if not self.success:
            return {"success": False, "error": self.error or "Unknown error"}

        payload: dict[str, Any] = {"success": True, "data": self.data}
        if self.usage is not None:
            payload["usage"] = self.usage.to_json_dict()
        return payload


class ModelListResult(CamelModel):
    """Результат запроса списка моделей провайдера."""

    success: bool
    models: list[str] | None = None
    error: str | None = None
