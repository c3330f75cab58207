"""Provider Store для Aether LLM.

Хранение LLMSettings в одном JSON файле и все CRUD операции
над провайдерами, плюс резолвинг параметров генерации и модели
по умолчанию для типа задачи.

Ограничение: последовательности read-modify-write (save/delete провайдера)
не атомарны относительно параллельных писателей - побеждает последняя
запись, файл перезаписывается целиком. Каждая отдельная запись атомарна
(временный файл + os.replace), частично записанный файл не наблюдаем.
"""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar

import orjson
from pydantic import BaseModel, ValidationError

from aether_llm.core.constants import API_KEY_MASK_PREFIX, API_KEY_VISIBLE_CHARS
from aether_llm.providers.base import (
    LLMSettings,
    ModelParams,
    ModelSelection,
    PartialModelParams,
    ProviderConfig,
    TaskModelConfig,
)
from aether_llm.shared.errors import PersistenceError
from aether_llm.shared.logging import get_logger

logger = get_logger()

DEFAULT_MODEL_PARAMS = ModelParams()

ModelT = TypeVar("ModelT", bound=BaseModel)


def default_settings_document() -> dict[str, Any]:
    """Документ настроек по умолчанию (camelCase, как в файле)."""
    return LLMSettings().model_dump(mode="json", by_alias=True)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Рекурсивно наложить override на base.

    Вложенные dict сливаются по ключам; null поверх dict не затирает
    структуру по умолчанию.

    Args:
        base: Документ по умолчанию
        override: Прочитанный документ

    Returns:
        Новый объединённый словарь
    """
    merged = dict(base)
    for key, value in override.items():
        base_value = merged.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            merged[key] = deep_merge(base_value, value)
        elif isinstance(base_value, dict) and value is None:
            continue
        else:
            merged[key] = value
    return merged


def merge_model_params(*layers: ModelParams | PartialModelParams | None) -> ModelParams:
    """Слить слои параметров поверх встроенных значений по умолчанию.

    Слои перечисляются от низкого приоритета к высокому; каждый слой
    переопределяет только явно заданные (не None) поля.

    Args:
        *layers: Слои параметров (None пропускается)

    Returns:
        Полный набор параметров
    """
    merged = DEFAULT_MODEL_PARAMS.model_dump()
    for layer in layers:
        if layer is None:
            continue
        merged.update(layer.model_dump(exclude_none=True))
    return ModelParams.model_validate(merged)


def mask_api_key(api_key: str) -> str:
    """Замаскировать API ключ для отдачи клиенту: ``***`` + 4 последних символа."""
    if not api_key:
        return ""
    return API_KEY_MASK_PREFIX + api_key[-API_KEY_VISIBLE_CHARS:]


def unmask_api_key(provider: ProviderConfig, stored: ProviderConfig | None) -> ProviderConfig:
    """Вернуть сохранённый ключ, если клиент прислал его маску без изменений."""
    if (
        stored is not None
        and provider.api_key.startswith(API_KEY_MASK_PREFIX)
        and provider.api_key == mask_api_key(stored.api_key)
    ):
        return provider.model_copy(update={"api_key": stored.api_key})
    return provider


def _validate_entry(model: type[ModelT], value: Any, section: str) -> ModelT | None:
    try:
        return model.model_validate(value)
    except ValidationError as e:
        logger.warning("Skipping invalid LLM settings entry", section=section, error=str(e))
        return None


def salvage_settings(document: dict[str, Any]) -> LLMSettings:
    """Разобрать документ настроек по записям, отбрасывая только невалидные.

    Используется, когда документ целиком не проходит валидацию: одно
    значение вне диапазона не должно стирать остальных провайдеров
    при следующей записи файла.

    Args:
        document: Документ, уже слитый с документом по умолчанию

    Returns:
        LLMSettings из валидных записей
    """
    raw_providers = document.get("providers")
    providers = [
        provider
        for index, item in enumerate(raw_providers if isinstance(raw_providers, list) else [])
        if (provider := _validate_entry(ProviderConfig, item, f"providers[{index}]")) is not None
    ]

    raw_params = document.get("defaultParams")
    params: dict[str, Any] = {}
    for key, value in (raw_params if isinstance(raw_params, dict) else {}).items():
        field = _validate_entry(PartialModelParams, {key: value}, f"defaultParams.{key}")
        if field is not None:
            params.update(field.model_dump(exclude_none=True))

    raw_tasks = document.get("taskModels")
    task_models = {
        task_type: task_config
        for task_type, item in (raw_tasks if isinstance(raw_tasks, dict) else {}).items()
        if (task_config := _validate_entry(TaskModelConfig, item, f"taskModels.{task_type}")) is not None
    }

    default_provider = document.get("defaultProvider")
    default_model = document.get("defaultModel")

    return LLMSettings(
        providers=providers,
        default_params=merge_model_params(PartialModelParams(**params)),
        default_provider=default_provider if isinstance(default_provider, str) else None,
        default_model=default_model if isinstance(default_model, str) else None,
        task_models=task_models,
    )


class ProviderStore:
    """Файловое хранилище LLMSettings.

    Блокирующий файловый ввод-вывод выполняется в worker thread,
    чтобы не блокировать event loop.
    """

    def __init__(self, config_path: str | Path) -> None:
        """Инициализировать ProviderStore.

        Args:
            config_path: Путь к JSON файлу настроек

        """
        self.config_path = Path(config_path)

    # =================================================================
    # Settings I/O
    # =================================================================

    async def load_settings(self) -> LLMSettings:
        """Прочитать настройки.

        При отсутствии файла или ошибке разбора возвращаются настройки
        по умолчанию. Прочитанный документ сливается с документом
        по умолчанию, поэтому старые файлы без новых полей остаются валидными.
        Невалидные записи (например, temperature вне диапазона) отбрасываются
        поодиночке, остальные провайдеры и параметры сохраняются.

        Returns:
            Структурно полный LLMSettings
        """
        return await asyncio.to_thread(self._read_settings)

    def _read_settings(self) -> LLMSettings:
        if not self.config_path.exists():
            return LLMSettings()

        try:
            raw = orjson.loads(self.config_path.read_bytes())
            if not isinstance(raw, dict):
                msg = f"expected JSON object, got {type(raw).__name__}"
                raise ValueError(msg)
            document = deep_merge(default_settings_document(), raw)
        except (OSError, ValueError) as e:
            # orjson.JSONDecodeError - подкласс ValueError
            logger.error(
                "Failed to load LLM settings, using defaults",
                path=str(self.config_path),
                error=str(e),
            )
            return LLMSettings()

        try:
            return LLMSettings.model_validate(document)
        except ValidationError as e:
            logger.warning(
                "LLM settings partially invalid, keeping valid entries",
                path=str(self.config_path),
                error=str(e),
            )
            return salvage_settings(document)

    async def save_settings(self, settings: LLMSettings) -> bool:
        """Перезаписать файл настроек целиком.

        Args:
            settings: Новые настройки

        Returns:
            True при успехе, False при ошибке записи (ошибка логируется)
        """
        try:
            await asyncio.to_thread(self._write_settings, settings)
        except PersistenceError as e:
            logger.error("Failed to save LLM settings", **e.details)
            return False

        logger.debug("LLM settings saved", path=str(self.config_path), providers=len(settings.providers))
        return True

    def _write_settings(self, settings: LLMSettings) -> None:
        payload = orjson.dumps(settings.to_json_dict(), option=orjson.OPT_INDENT_2)
        directory = self.config_path.parent
        tmp_path: str | None = None

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=f".{self.config_path.name}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as tmp_file:
                tmp_file.write(payload)
            os.replace(tmp_path, self.config_path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(str(self.config_path), str(e)) from e

    # =================================================================
    # Providers CRUD
    # =================================================================

    async def get_all_providers(self) -> list[ProviderConfig]:
        """Все сохранённые провайдеры."""
        settings = await self.load_settings()
        return settings.providers

    async def get_provider(self, provider_id: str) -> ProviderConfig | None:
        """Найти провайдер по точному совпадению id.

        Args:
            provider_id: Идентификатор провайдера

        Returns:
            ProviderConfig или None если не найден
        """
        settings = await self.load_settings()
        return next((p for p in settings.providers if p.id == provider_id), None)

    async def save_provider_config(self, config: ProviderConfig) -> bool:
        """Upsert провайдера по id: заменить существующий или добавить новый.

        Args:
            config: Полная конфигурация провайдера

        Returns:
            Результат записи файла
        """
        settings = await self.load_settings()

        for index, provider in enumerate(settings.providers):
            if provider.id == config.id:
                settings.providers[index] = config
                action = "updated"
                break
        else:
            settings.providers.append(config)
            action = "created"

        logger.info("Provider config saved", provider_id=config.id, action=action)
        return await self.save_settings(settings)

    async def delete_provider(self, provider_id: str) -> bool:
        """Удалить провайдер и все ссылки на него.

        Сбрасывает default_provider/default_model и удаляет переопределения
        задач, ссылающиеся на удаляемый провайдер.

        Args:
            provider_id: Идентификатор провайдера

        Returns:
            False если провайдер не найден (файл не меняется), иначе результат записи
        """
        settings = await self.load_settings()
        remaining = [p for p in settings.providers if p.id != provider_id]

        if len(remaining) == len(settings.providers):
            logger.warning("Provider not found for deletion", provider_id=provider_id)
            return False

        settings.providers = remaining

        if settings.default_provider == provider_id:
            settings.default_provider = None
            settings.default_model = None

        stale_tasks = [
            task_type for task_type, task_config in settings.task_models.items()
            if task_config.provider_id == provider_id
        ]
        for task_type in stale_tasks:
            del settings.task_models[task_type]

        logger.info("Provider deleted", provider_id=provider_id, cleared_task_models=stale_tasks)
        return await self.save_settings(settings)

    async def restore_masked_credentials(self, incoming: LLMSettings) -> LLMSettings:
        """Вернуть сохранённые ключи вместо замаскированных.

        Клиент получает конфиг с ключами вида ``***abcd``; если такой конфиг
        отправлен обратно без изменения ключа, сохранённый ключ остаётся.

        Args:
            incoming: Настройки от клиента

        Returns:
            Настройки с восстановленными ключами
        """
        current = {p.id: p for p in (await self.load_settings()).providers}
        providers = [unmask_api_key(provider, current.get(provider.id)) for provider in incoming.providers]
        return incoming.model_copy(update={"providers": providers})

    # =================================================================
    # Resolution
    # =================================================================

    async def get_effective_params(
        self,
        task_type: str,
        request_params: PartialModelParams | None = None,
    ) -> ModelParams:
        """Эффективные параметры генерации для задачи.

        Приоритет (от низкого к высокому): встроенные значения по умолчанию,
        глобальные default_params, параметры переопределения задачи,
        параметры запроса.

        Args:
            task_type: Тип задачи
            request_params: Переопределения из запроса

        Returns:
            Полный набор параметров
        """
        settings = await self.load_settings()
        task_config = settings.task_models.get(task_type)
        task_params = task_config.params if task_config else None

        return merge_model_params(settings.default_params, task_params, request_params)

    async def get_default_model_for_task(self, task_type: str) -> ModelSelection | None:
        """Провайдер и модель по умолчанию для задачи.

        Порядок: переопределение задачи, глобальная пара по умолчанию,
        первый включённый провайдер с известными моделями (его первая модель).

        Args:
            task_type: Тип задачи

        Returns:
            ModelSelection или None если ничего не настроено
        """
        settings = await self.load_settings()

        task_config = settings.task_models.get(task_type)
        if task_config is not None:
            return ModelSelection(provider_id=task_config.provider_id, model_id=task_config.model_id)

        if settings.default_provider and settings.default_model:
            return ModelSelection(provider_id=settings.default_provider, model_id=settings.default_model)

        for provider in settings.providers:
            if provider.is_enabled and provider.models:
                return ModelSelection(provider_id=provider.id, model_id=provider.models[0])

        return None
