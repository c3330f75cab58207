"""Task Executor - выполнение LLM задач через OpenAI-compatible API.

Отвечает ТОЛЬКО за один запрос к chat/completions: выбор провайдера,
промпты, параметры, вызов API и разбор ответа. Fallback логика
находится в LLMService.

Example:
    >>> executor = TaskExecutor(store)
    >>> result = await executor.execute(
    ...     TaskRequest(task_type="translate", provider_id="openai", model_id="gpt-4o",
    ...                 params={"text": "Hello"})
    ... )
    >>> result.data
    {'translation': '你好'}

"""

import re
from typing import Any

import httpx
import orjson

from aether_llm.core.constants import CHAT_COMPLETIONS_PATH, JSON_RESPONSE_FORMAT
from aether_llm.prompts import TaskPrompt, get_task_prompt
from aether_llm.providers.base import (
    ModelParams,
    ProviderConfig,
    TaskRequest,
    TaskResult,
    TaskUsage,
)
from aether_llm.providers.store import ProviderStore
from aether_llm.shared.errors import (
    ApiError,
    AppException,
    EmptyResponseError,
    NetworkError,
    PromptBuildError,
    ProviderDisabledError,
    ProviderNotFoundError,
    ResponseParseError,
    TRANSPORT_ERRORS,
)
from aether_llm.shared.logging import get_logger

logger = get_logger()

CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL)


def strip_markdown_code_fences(content: str) -> str:
    """Снять markdown ограждение с JSON ответа.

    Некоторые модели оборачивают JSON в ```json ... ``` даже в json_object режиме.
    Снимается только ограждение вокруг всего ответа; идемпотентна.

    Args:
        content: Ответ модели

    Returns:
        Содержимое внутри ограждения или исходный текст без крайних пробелов
    """
    trimmed = content.strip()
    match = CODE_FENCE_PATTERN.match(trimmed)
    return match.group(1).strip() if match else trimmed


def build_request_body(
    model_id: str,
    system_prompt: str,
    user_message: str,
    params: ModelParams,
) -> dict[str, Any]:
    """Тело запроса chat/completions.

    max_tokens и seed передаются только если заданы.
    """
    body: dict[str, Any] = {
        "model": model_id,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ],
        "temperature": params.temperature,
        "top_p": params.top_p,
        "frequency_penalty": params.frequency_penalty,
        "presence_penalty": params.presence_penalty,
    }

    if params.max_tokens is not None:
        body["max_tokens"] = params.max_tokens
    if params.seed is not None:
        body["seed"] = params.seed

    body["response_format"] = JSON_RESPONSE_FORMAT
    return body


def parse_usage(raw: Any) -> TaskUsage | None:
    """Usage из ответа провайдера (отсутствующие счётчики = 0)."""
    if not isinstance(raw, dict):
        return None

    def count(key: str) -> int:
        value = raw.get(key)
        return value if isinstance(value, int) and not isinstance(value, bool) else 0

    return TaskUsage(
        prompt_tokens=count("prompt_tokens"),
        completion_tokens=count("completion_tokens"),
        total_tokens=count("total_tokens"),
    )


def extract_content(payload: Any) -> str:
    """Текст первого choice.

    Raises:
        EmptyResponseError: Если content отсутствует, пуст или не строка
    """
    choices = payload.get("choices") if isinstance(payload, dict) else None
    first = choices[0] if isinstance(choices, list) and choices else None
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None

    if not isinstance(content, str) or not content:
        raise EmptyResponseError
    return content


class TaskExecutor:
    """Executor для LLM задач.

    Single Responsibility: один вызов chat/completions на задачу, без ретраев.
    Никогда не бросает исключения из execute: любая AppException
    превращается в TaskResult(success=False).

    Attributes:
        store: Хранилище провайдеров и параметров
        timeout: Таймаут HTTP запроса в секундах

    """

    def __init__(
        self,
        store: ProviderStore,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Инициализировать TaskExecutor.

        Args:
            store: Хранилище провайдеров
            timeout: Таймаут HTTP запроса в секундах
            transport: HTTP transport (в тестах - httpx.MockTransport)

        """
        self.store = store
        self.timeout = timeout
        self.transport = transport

    async def execute(self, request: TaskRequest) -> TaskResult:
        """Выполнить задачу.

        Args:
            request: Запрос задачи

        Returns:
            TaskResult с данными задачи и usage, либо с сообщением об ошибке
        """
        logger.info(
            "Начало выполнения задачи",
            task_type=request.task_type,
            provider_id=request.provider_id,
            model_id=request.model_id,
        )

        try:
            data, usage = await self._run(request)
        except AppException as e:
            context = {"task_type": request.task_type, "provider_id": request.provider_id, **e.log_context()}
            logger.warning("Задача завершилась ошибкой", error=e.message, **context)
            return TaskResult.fail(e.message)

        logger.info(
            "Задача выполнена успешно",
            task_type=request.task_type,
            provider_id=request.provider_id,
            total_tokens=usage.total_tokens if usage else None,
        )
        return TaskResult.ok(data, usage)

    async def _run(self, request: TaskRequest) -> tuple[Any, TaskUsage | None]:
        provider = await self._resolve_provider(request.provider_id)
        prompt, system_prompt, user_message = self._build_prompts(request)
        params = await self.store.get_effective_params(request.task_type, request.model_params)

        body = build_request_body(request.model_id, system_prompt, user_message, params)
        payload = await self._post_chat_completion(provider, body)

        content = extract_content(payload)
        try:
            parsed = orjson.loads(strip_markdown_code_fences(content))
        except orjson.JSONDecodeError as e:
            raise ResponseParseError(content, details={"reason": str(e)}) from e

        return prompt.parse_response(parsed), parse_usage(payload.get("usage"))

    async def _resolve_provider(self, provider_id: str) -> ProviderConfig:
        provider = await self.store.get_provider(provider_id)
        if provider is None:
            raise ProviderNotFoundError(provider_id)
        if not provider.is_enabled:
            raise ProviderDisabledError(provider.name, provider_id=provider.id)
        return provider

    def _build_prompts(self, request: TaskRequest) -> tuple[TaskPrompt, str, str]:
        try:
            prompt = get_task_prompt(request.task_type)
            system_prompt = prompt.system_prompt(request.params)
            user_message = prompt.user_message(request.params)
        except Exception as e:  # noqa: BLE001
            message = e.message if isinstance(e, AppException) else str(e)
            raise PromptBuildError(message, task_type=request.task_type) from e
        return prompt, system_prompt, user_message

    async def _post_chat_completion(self, provider: ProviderConfig, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{provider.base_url.removesuffix('/')}{CHAT_COMPLETIONS_PATH}"
        headers = {
            "Authorization": f"Bearer {provider.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, content=orjson.dumps(body), headers=headers)
        except TRANSPORT_ERRORS as e:
            raise NetworkError.from_exception(e) from e

        if not response.is_success:
            raise ApiError(response.status_code, response.text)

        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise ResponseParseError(response.text) from e

        if not isinstance(payload, dict):
            raise EmptyResponseError
        return payload
