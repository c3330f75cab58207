"""Request Schemas для Aether LLM API.

Pydantic models для входящих запросов. Обязательные поля объявлены
опциональными и проверяются в handlers, чтобы отвечать 400 с понятным
сообщением вместо ошибки валидации.
"""

from typing import Any

from pydantic import Field

from aether_llm.core.constants import DEFAULT_GREETING_COUNT
from aether_llm.core.enums import Language
from aether_llm.providers.base import CamelModel, LLMSettings, PartialModelParams


class ExecuteTaskRequest(CamelModel):
    """Запрос на выполнение задачи.

    POST /api/llm/execute
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "taskType": "translate",
                    "providerId": "openai",
                    "modelId": "gpt-4o-mini",
                    "params": {"text": "Hello, world", "from": "English", "to": "Chinese"},
                    "modelParams": {"temperature": 0.3},
                },
            ]
        }
    }

    task_type: str | None = Field(default=None, description="Тип задачи")
    provider_id: str | None = Field(default=None, description="Идентификатор провайдера")
    model_id: str | None = Field(default=None, description="Идентификатор модели")
    params: dict[str, Any] = Field(default_factory=dict, description="Параметры задачи")
    model_params: PartialModelParams | None = Field(default=None, description="Переопределения генерации")


class FetchModelsRequest(CamelModel):
    """POST /api/llm/models"""

    base_url: str | None = None
    api_key: str | None = None


class SaveConfigRequest(CamelModel):
    """POST /api/llm/config"""

    config: LLMSettings | None = None


class SaveProviderRequest(CamelModel):
    """POST /api/llm/provider

    provider валидируется в handler после проверки id.
    """

    provider: dict[str, Any] | None = None


class SegmentRequest(CamelModel):
    """POST /api/llm/segment"""

    text: str | None = None
    language: Language = Language.EN
    provider_id: str | None = None
    model_id: str | None = None


class AlignRequest(CamelModel):
    """POST /api/llm/align и POST /api/llm/segment-both"""

    en_text: str = ""
    zh_text: str = ""
    provider_id: str | None = None
    model_id: str | None = None


class GreetingsRequest(CamelModel):
    """POST /api/llm/greetings"""

    user_name: str | None = None
    custom_prompt: str | None = None
    count: int = Field(default=DEFAULT_GREETING_COUNT, description="Количество (ограничивается 1-20)")
    provider_id: str | None = None
    model_id: str | None = None
