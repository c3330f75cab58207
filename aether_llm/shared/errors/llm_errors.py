"""LLM-специфичные исключения.

Исключения, специфичные для выполнения LLM задач, провайдеров
и разбора ответов моделей. Сообщения исключений уходят клиенту
как поле `error` в ответе `{success: false, error}`.
"""

from typing import Any

import httpx

from aether_llm.core.constants import RESPONSE_SNIPPET_LENGTH
from aether_llm.shared.errors.base import AppException


class ProviderNotFoundError(AppException):
    """Provider not found."""

    status_code = 404

    def __init__(self, provider_id: str) -> None:
        """Инициализация ошибки.

        Args:
            provider_id: Идентификатор провайдера.

        """
        super().__init__(
            message=f"Provider not found: {provider_id}",
            details={"provider_id": provider_id},
        )


class ProviderDisabledError(AppException):
    """Provider is disabled."""

    status_code = 409

    def __init__(self, provider_name: str, provider_id: str | None = None) -> None:
        """Инициализация ошибки.

        Args:
            provider_name: Отображаемое имя провайдера.
            provider_id: Идентификатор провайдера.

        """
        super().__init__(
            message=f"Provider is disabled: {provider_name}",
            details={"provider_id": provider_id, "provider_name": provider_name},
        )


class UnknownTaskTypeError(AppException):
    """Unknown task type."""

    status_code = 400

    def __init__(self, task_type: str) -> None:
        """Инициализация ошибки.

        Args:
            task_type: Незарегистрированный тип задачи.

        """
        self.task_type = task_type
        super().__init__(
            message=f"Unknown task type: {task_type}",
            details={"task_type": task_type},
        )


class PromptBuildError(AppException):
    """Failed to build prompts."""

    status_code = 400

    def __init__(self, reason: str, task_type: str | None = None) -> None:
        """Инициализация ошибки.

        Args:
            reason: Сообщение исходной ошибки построения промпта.
            task_type: Тип задачи.

        """
        super().__init__(
            message=f"Failed to build prompts: {reason}",
            details={"task_type": task_type, "reason": reason},
        )


class ApiError(AppException):
    """Provider API returned an error."""

    status_code = 502

    def __init__(self, status: int, body: str) -> None:
        """Инициализация ошибки.

        Args:
            status: HTTP статус ответа провайдера.
            body: Сырое тело ответа.

        """
        self.status = status
        self.body = body
        super().__init__(
            message=f"API error ({status}): {body}",
            details={"status": status},
        )


class EmptyResponseError(AppException):
    """No content in LLM response."""

    status_code = 502
    default_message = "No content in LLM response"


class ResponseParseError(AppException):
    """Failed to parse LLM response as JSON."""

    status_code = 502

    def __init__(self, content: str, details: dict[str, Any] | None = None) -> None:
        """Инициализация ошибки.

        Args:
            content: Ответ модели, который не удалось разобрать.
            details: Дополнительная информация.

        """
        self.snippet = content[:RESPONSE_SNIPPET_LENGTH]
        super().__init__(
            message=f"Failed to parse LLM response as JSON: {self.snippet}",
            details=details,
        )


# Исключения, после которых ответа провайдера нет
TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError)


class NetworkError(AppException):
    """Network error."""

    status_code = 503

    def __init__(self, reason: str) -> None:
        """Инициализация ошибки.

        Args:
            reason: Сообщение исходного исключения транспорта.

        """
        super().__init__(
            message=f"Network error: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def from_exception(cls, exc: Exception) -> "NetworkError":
        """NetworkError из исключения транспорта (пустое сообщение заменяется именем типа)."""
        return cls(str(exc) or type(exc).__name__)


class InvalidResponseFormatError(AppException):
    """Invalid response format from models endpoint."""

    status_code = 502
    default_message = "Invalid response format from models endpoint"
