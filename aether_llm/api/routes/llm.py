"""Aether LLM - LLM Endpoints.

Выполнение задач, управление провайдерами и настройками,
обнаружение моделей. Все ответы содержат поле ``success``.
"""

from typing import Any

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from aether_llm.api.schemas import (
    AlignRequest,
    ConfigResponse,
    ExecuteTaskRequest,
    FetchModelsRequest,
    GreetingsRequest,
    ModelsResponse,
    SaveConfigRequest,
    SaveProviderRequest,
    SegmentRequest,
    SuccessResponse,
)
from aether_llm.core.constants import API_PREFIX
from aether_llm.core.dependencies import (
    LLMServiceDep,
    ModelDiscoveryDep,
    ProviderStoreDep,
    TaskExecutorDep,
)
from aether_llm.providers.base import ModelListResult, ProviderConfig, TaskRequest
from aether_llm.providers.store import mask_api_key, unmask_api_key
from aether_llm.services.llm_service import (
    AlignmentResult,
    BilingualSegmentation,
    GreetingResult,
    SegmentationResult,
)
from aether_llm.shared.errors import AppException, BadRequestError, NotFoundError
from aether_llm.shared.logging import get_logger

logger = get_logger()

router = APIRouter(prefix=API_PREFIX, tags=["LLM"])


def failure_response(status_code: int, error: str | None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error or "Unknown error"})


def models_response(result: ModelListResult) -> ModelsResponse | JSONResponse:
    if not result.success:
        return failure_response(status.HTTP_400_BAD_REQUEST, result.error)
    return ModelsResponse(models=result.models or [])


# =================================================================
# Tasks
# =================================================================


@router.post(
    "/execute",
    summary="Выполнить LLM задачу",
    description="Один вызов chat/completions выбранного провайдера с промптами задачи",
)
async def execute_task(request: ExecuteTaskRequest, executor: TaskExecutorDep) -> JSONResponse:
    """Выполнить задачу.

    Args:
        request: Тип задачи, провайдер, модель и параметры.
        executor: Task executor.

    Returns:
        200 ``{success, data, usage?}`` или 400 ``{success: false, error}``.

    Raises:
        BadRequestError: Если не заданы taskType, providerId или modelId.

    """
    if not request.task_type or not request.provider_id or not request.model_id:
        raise BadRequestError("Missing required fields: taskType, providerId, modelId")

    result = await executor.execute(
        TaskRequest(
            task_type=request.task_type,
            provider_id=request.provider_id,
            model_id=request.model_id,
            params=request.params,
            model_params=request.model_params,
        )
    )

    status_code = status.HTTP_200_OK if result.success else status.HTTP_400_BAD_REQUEST
    return JSONResponse(status_code=status_code, content=result.to_payload())


@router.post(
    "/segment",
    response_model=SegmentationResult,
    response_model_exclude_none=True,
    summary="Разбить текст на предложения",
)
async def segment_text(request: SegmentRequest, service: LLMServiceDep) -> SegmentationResult:
    """Сегментация текста через LLM с regex fallback."""
    if request.text is None:
        raise BadRequestError("Missing text field")

    return await service.segment_text(request.text, request.language, request.provider_id, request.model_id)


@router.post(
    "/align",
    response_model=AlignmentResult,
    response_model_exclude_none=True,
    summary="Выровнять EN/ZH тексты",
)
async def align_texts(request: AlignRequest, service: LLMServiceDep) -> AlignmentResult:
    """Сегментация и выравнивание параллельных текстов."""
    return await service.segment_and_align(request.en_text, request.zh_text, request.provider_id, request.model_id)


@router.post(
    "/segment-both",
    response_model=BilingualSegmentation,
    response_model_exclude_none=True,
    summary="Разбить EN и ZH тексты независимо",
)
async def segment_both_texts(request: AlignRequest, service: LLMServiceDep) -> BilingualSegmentation:
    """Параллельная сегментация обоих текстов, у каждого свой fallback."""
    return await service.segment_both_texts(request.en_text, request.zh_text, request.provider_id, request.model_id)


@router.post(
    "/greetings",
    response_model=GreetingResult,
    response_model_exclude_none=True,
    summary="Сгенерировать приветствия",
)
async def generate_greetings(request: GreetingsRequest, service: LLMServiceDep) -> GreetingResult:
    """Персональные приветствия со стандартным набором в качестве fallback."""
    return await service.generate_greetings(
        user_name=request.user_name,
        custom_prompt=request.custom_prompt,
        count=request.count,
        provider_id=request.provider_id,
        model_id=request.model_id,
    )


# =================================================================
# Models
# =================================================================


@router.post("/models", response_model=ModelsResponse, summary="Список моделей провайдера")
async def fetch_models(request: FetchModelsRequest, discovery: ModelDiscoveryDep) -> Any:
    """Запросить text-модели по baseUrl и apiKey.

    Raises:
        BadRequestError: Если не задан baseUrl или apiKey.

    """
    if not request.base_url or not request.api_key:
        raise BadRequestError("Missing baseUrl or apiKey")

    return models_response(await discovery.fetch_models(request.base_url, request.api_key))


@router.post("/provider/models", response_model=ModelsResponse, summary="Обновить модели сохранённого провайдера")
async def refresh_provider_models(
    store: ProviderStoreDep,
    discovery: ModelDiscoveryDep,
    provider_id: str | None = Query(default=None, alias="id"),
) -> Any:
    """Запросить модели сохранённого провайдера и сохранить список."""
    if not provider_id:
        raise BadRequestError("Missing provider id parameter")

    return models_response(await discovery.refresh_provider_models(store, provider_id))


# =================================================================
# Configuration
# =================================================================


@router.get("/config", response_model=ConfigResponse, summary="Текущие настройки")
async def get_config(store: ProviderStoreDep) -> ConfigResponse:
    """Настройки с замаскированными API ключами (``***`` + 4 последних символа)."""
    settings = await store.load_settings()
    providers = [
        provider.model_copy(update={"api_key": mask_api_key(provider.api_key)})
        for provider in settings.providers
    ]
    return ConfigResponse(config=settings.model_copy(update={"providers": providers}))


@router.post("/config", response_model=SuccessResponse, summary="Сохранить настройки")
async def save_config(request: SaveConfigRequest, store: ProviderStoreDep) -> SuccessResponse:
    """Перезаписать настройки целиком.

    Замаскированные ключи, полученные из GET /config, заменяются сохранёнными.

    Raises:
        BadRequestError: Если нет поля config.
        AppException: Если запись не удалась (500).

    """
    if request.config is None:
        raise BadRequestError("Missing config field")

    settings = await store.restore_masked_credentials(request.config)
    if not await store.save_settings(settings):
        raise AppException("Failed to save configuration")

    logger.info("LLM configuration saved", providers=len(settings.providers))
    return SuccessResponse()


@router.post("/provider", response_model=SuccessResponse, summary="Создать или обновить провайдер")
async def save_provider(request: SaveProviderRequest, store: ProviderStoreDep) -> SuccessResponse:
    """Upsert провайдера по id.

    Raises:
        BadRequestError: Если нет provider, provider.id или конфигурация невалидна.
        AppException: Если запись не удалась (500).

    """
    if not request.provider or not request.provider.get("id"):
        raise BadRequestError("Missing provider or provider.id")

    try:
        provider = ProviderConfig.model_validate(request.provider)
    except ValidationError as e:
        raise BadRequestError(f"Invalid provider: {e.errors()[0]['msg']}") from e

    provider = unmask_api_key(provider, await store.get_provider(provider.id))
    if not await store.save_provider_config(provider):
        raise AppException("Failed to save provider")

    return SuccessResponse()


@router.delete("/provider", response_model=SuccessResponse, summary="Удалить провайдер")
async def delete_provider(
    store: ProviderStoreDep,
    provider_id: str | None = Query(default=None, alias="id"),
) -> SuccessResponse:
    """Удалить провайдер и ссылки на него.

    Raises:
        BadRequestError: Если не передан параметр id.
        NotFoundError: Если провайдер не найден.

    """
    if not provider_id:
        raise BadRequestError("Missing provider id parameter")

    if not await store.delete_provider(provider_id):
        raise NotFoundError("Provider not found")

    return SuccessResponse()
