"""LLM Service - задачи высокого уровня с regex/статическим fallback.

Сегментация, выравнивание и приветствия: если провайдер не настроен
или LLM вызов неудачен, результат строится без LLM, а причина
сохраняется в поле error.
"""

import asyncio

from pydantic import Field

from aether_llm.core.constants import DEFAULT_GREETING_COUNT, DEFAULT_GREETINGS
from aether_llm.core.enums import Language, TaskType
from aether_llm.providers.base import CamelModel, ModelSelection, TaskRequest
from aether_llm.providers.store import ProviderStore
from aether_llm.services.task_executor import TaskExecutor
from aether_llm.shared.logging import get_logger
from aether_llm.utils.text import split_into_sentences

logger = get_logger()


class SegmentPair(CamelModel):
    """Пара выровненных предложений."""

    en: str = ""
    zh: str = ""


class SegmentationResult(CamelModel):
    """Результат сегментации одного текста."""

    success: bool = True
    segments: list[str] = Field(default_factory=list)
    used_fallback: bool = False
    error: str | None = None


class AlignmentResult(CamelModel):
    """Результат выравнивания EN/ZH текстов."""

    success: bool = True
    pairs: list[SegmentPair] = Field(default_factory=list)
    used_fallback: bool = False
    error: str | None = None


class BilingualSegmentation(CamelModel):
    """Независимая сегментация обоих текстов."""

    en: SegmentationResult
    zh: SegmentationResult


class GreetingResult(CamelModel):
    """Сгенерированные приветствия."""

    success: bool = True
    greetings: list[str] = Field(default_factory=list)
    used_fallback: bool = False
    error: str | None = None


def pair_by_index(en_text: str, zh_text: str) -> list[SegmentPair]:
    """Fallback выравнивание: i-е предложение EN с i-м предложением ZH."""
    en_segments = split_into_sentences(en_text)
    zh_segments = split_into_sentences(zh_text)
    size = max(len(en_segments), len(zh_segments))

    return [
        SegmentPair(
            en=en_segments[i] if i < len(en_segments) else "",
            zh=zh_segments[i] if i < len(zh_segments) else "",
        )
        for i in range(size)
    ]


class LLMService:
    """Высокоуровневые LLM операции поверх TaskExecutor."""

    def __init__(self, store: ProviderStore, executor: TaskExecutor) -> None:
        """Инициализировать LLMService.

        Args:
            store: Хранилище провайдеров (для выбора модели по умолчанию)
            executor: Executor LLM задач

        """
        self.store = store
        self.executor = executor

    async def _resolve_model(
        self,
        task_type: TaskType,
        provider_id: str | None,
        model_id: str | None,
    ) -> ModelSelection | None:
        if provider_id and model_id:
            return ModelSelection(provider_id=provider_id, model_id=model_id)
        return await self.store.get_default_model_for_task(task_type.value)

    async def segment_text(
        self,
        text: str,
        language: Language | str,
        provider_id: str | None = None,
        model_id: str | None = None,
    ) -> SegmentationResult:
        """Разбить текст на предложения через LLM с regex fallback.

        Args:
            text: Исходный текст
            language: Язык текста ("en" или "zh")
            provider_id: Провайдер (по умолчанию из настроек)
            model_id: Модель (по умолчанию из настроек)

        Returns:
            SegmentationResult
        """
        if not text.strip():
            return SegmentationResult()

        selection = await self._resolve_model(TaskType.SEGMENT, provider_id, model_id)
        if selection is None:
            logger.warning("No LLM provider configured, using regex segmentation", task_type=TaskType.SEGMENT.value)
            return SegmentationResult(segments=split_into_sentences(text), used_fallback=True)

        language_value = language.value if isinstance(language, Language) else language
        result = await self.executor.execute(
            TaskRequest(
                task_type=TaskType.SEGMENT.value,
                provider_id=selection.provider_id,
                model_id=selection.model_id,
                params={"text": text, "language": language_value},
            )
        )

        segments = result.data.get("segments") if result.success else None
        if segments:
            return SegmentationResult(segments=segments)

        error = result.error or "LLM returned no segments"
        logger.warning("LLM segmentation failed, using regex fallback", error=error)
        return SegmentationResult(segments=split_into_sentences(text), used_fallback=True, error=error)

    async def segment_and_align(
        self,
        en_text: str,
        zh_text: str,
        provider_id: str | None = None,
        model_id: str | None = None,
    ) -> AlignmentResult:
        """Сегментировать и выровнять EN/ZH тексты через LLM.

        При недоступности LLM предложения сопоставляются по индексу.

        Args:
            en_text: Английский текст
            zh_text: Китайский текст
            provider_id: Провайдер (по умолчанию из настроек)
            model_id: Модель (по умолчанию из настроек)

        Returns:
            AlignmentResult
        """
        if not en_text.strip() and not zh_text.strip():
            return AlignmentResult()

        selection = await self._resolve_model(TaskType.SEGMENT_ALIGN, provider_id, model_id)
        if selection is None:
            logger.warning("No LLM provider configured, using index alignment", task_type=TaskType.SEGMENT_ALIGN.value)
            return AlignmentResult(pairs=pair_by_index(en_text, zh_text), used_fallback=True)

        result = await self.executor.execute(
            TaskRequest(
                task_type=TaskType.SEGMENT_ALIGN.value,
                provider_id=selection.provider_id,
                model_id=selection.model_id,
                params={"enText": en_text, "zhText": zh_text},
            )
        )

        pairs = result.data.get("pairs") if result.success else None
        if pairs:
            return AlignmentResult(pairs=[SegmentPair.model_validate(pair) for pair in pairs])

        error = result.error or "LLM returned no pairs"
        logger.warning("LLM alignment failed, using index alignment", error=error)
        return AlignmentResult(pairs=pair_by_index(en_text, zh_text), used_fallback=True, error=error)

    async def segment_both_texts(
        self,
        en_text: str,
        zh_text: str,
        provider_id: str | None = None,
        model_id: str | None = None,
    ) -> BilingualSegmentation:
        """Сегментировать EN и ZH тексты независимо и параллельно."""
        en, zh = await asyncio.gather(
            self.segment_text(en_text, Language.EN, provider_id, model_id),
            self.segment_text(zh_text, Language.ZH, provider_id, model_id),
        )
        return BilingualSegmentation(en=en, zh=zh)

    async def generate_greetings(
        self,
        user_name: str | None = None,
        custom_prompt: str | None = None,
        count: int = DEFAULT_GREETING_COUNT,
        provider_id: str | None = None,
        model_id: str | None = None,
    ) -> GreetingResult:
        """Сгенерировать приветствия; при неудаче вернуть стандартный набор.

        Args:
            user_name: Имя пользователя
            custom_prompt: Пожелания пользователя к стилю
            count: Количество приветствий
            provider_id: Провайдер (по умолчанию из настроек)
            model_id: Модель (по умолчанию из настроек)

        Returns:
            GreetingResult
        """
        selection = await self._resolve_model(TaskType.GREETING, provider_id, model_id)
        if selection is None:
            return GreetingResult(greetings=list(DEFAULT_GREETINGS), used_fallback=True)

        result = await self.executor.execute(
            TaskRequest(
                task_type=TaskType.GREETING.value,
                provider_id=selection.provider_id,
                model_id=selection.model_id,
                params={"userName": user_name, "customPrompt": custom_prompt, "count": count},
            )
        )

        greetings = result.data.get("greetings") if result.success else None
        if greetings:
            return GreetingResult(greetings=greetings)

        error = result.error or "LLM returned no greetings"
        logger.warning("Greeting generation failed, using default greetings", error=error)
        return GreetingResult(greetings=list(DEFAULT_GREETINGS), used_fallback=True, error=error)
