"""Model Discovery - список моделей OpenAI-compatible провайдера."""

from collections.abc import Iterable
from typing import Any

import httpx
import orjson

from aether_llm.core.constants import MODELS_PATH, NON_TEXT_MODEL_MARKERS
from aether_llm.providers.base import ModelListResult
from aether_llm.providers.store import ProviderStore
from aether_llm.shared.errors import (
    ApiError,
    AppException,
    InvalidResponseFormatError,
    NetworkError,
    ProviderNotFoundError,
    TRANSPORT_ERRORS,
)
from aether_llm.shared.logging import get_logger

logger = get_logger()


def filter_text_models(model_ids: Iterable[Any]) -> list[str]:
    """Оставить только text-completion модели.

    Отбрасывает id, содержащие (без учёта регистра) маркеры image/audio/
    embedding/moderation моделей, и не-строковые id.

    Args:
        model_ids: Идентификаторы из ответа /models

    Returns:
        Отсортированный список id
    """
    return sorted(
        model_id
        for model_id in model_ids
        if isinstance(model_id, str)
        and not any(marker in model_id.lower() for marker in NON_TEXT_MODEL_MARKERS)
    )


class ModelDiscovery:
    """Запрос списка моделей у провайдера.

    Все ошибки возвращаются как ModelListResult(success=False), не исключения.
    """

    def __init__(
        self,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Инициализация.

        Args:
            timeout: Таймаут HTTP запроса в секундах
            transport: HTTP transport (в тестах - httpx.MockTransport)

        """
        self.timeout = timeout
        self.transport = transport

    async def fetch_models(self, base_url: str, api_key: str) -> ModelListResult:
        """Получить text-модели провайдера.

        Args:
            base_url: Base URL API провайдера
            api_key: Bearer credential

        Returns:
            ModelListResult с отфильтрованным списком или ошибкой
        """
        try:
            model_ids = await self._request_model_ids(base_url, api_key)
        except AppException as e:
            logger.warning("Model discovery failed", base_url=base_url, error=e.message, **e.log_context())
            return ModelListResult(success=False, error=e.message)

        models = filter_text_models(model_ids)
        logger.info("Models discovered", base_url=base_url, total=len(model_ids), text_models=len(models))
        return ModelListResult(success=True, models=models)

    async def refresh_provider_models(self, store: ProviderStore, provider_id: str) -> ModelListResult:
        """Обновить сохранённый список моделей провайдера.

        Args:
            store: Хранилище провайдеров
            provider_id: Идентификатор провайдера

        Returns:
            Результат запроса моделей (при успехе список уже сохранён)
        """
        provider = await store.get_provider(provider_id)
        if provider is None:
            return ModelListResult(success=False, error=ProviderNotFoundError(provider_id).message)

        result = await self.fetch_models(provider.base_url, provider.api_key)
        if not result.success:
            return result

        saved = await store.save_provider_config(provider.model_copy(update={"models": result.models}))
        if not saved:
            return ModelListResult(success=False, error="Failed to save provider")

        return result

    async def _request_model_ids(self, base_url: str, api_key: str) -> list[Any]:
        url = f"{base_url.removesuffix('/')}{MODELS_PATH}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, headers={"Authorization": f"Bearer {api_key}"})
        except TRANSPORT_ERRORS as e:
            raise NetworkError.from_exception(e) from e

        if not response.is_success:
            raise ApiError(response.status_code, response.text)

        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise InvalidResponseFormatError from e

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise InvalidResponseFormatError

        return [item.get("id") for item in data if isinstance(item, dict)]
