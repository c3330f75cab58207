"""Base exception class for application errors.

Все ошибки сервиса наследуются от AppException. Сообщение исключения
уходит клиенту как поле ``error``, details попадают только в логи.
"""

import re
from typing import Any, ClassVar

from aether_llm.shared.errors.schemas import ErrorResponse

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def error_code_from_name(class_name: str) -> str:
    """ProviderNotFoundError -> PROVIDER_NOT_FOUND."""
    stem = class_name.removesuffix("Error").removesuffix("Exception") or class_name
    return _CAMEL_BOUNDARY.sub("_", stem).upper()


class AppException(Exception):
    """Базовый класс для всех ошибок сервиса.

    Подклассы получают автоматически:
    - code из имени класса, если не задан явно
    - default_message из первой строки docstring, если не задан явно

    Attributes:
        status_code: HTTP статус для обработчика FastAPI
        code: Машиночитаемый код (заголовок X-Error-Code)
        message: Сообщение для клиента
        details: Контекст для логов, клиенту не отдаётся

    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: ClassVar[str] = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = {key: value for key, value in (details or {}).items() if value is not None}
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        if "code" not in cls.__dict__:
            cls.code = error_code_from_name(cls.__name__)

        if "default_message" not in cls.__dict__ and cls.__doc__:
            cls.default_message = cls.__doc__.strip().splitlines()[0]

    def log_context(self) -> dict[str, Any]:
        """Поля для структурированного лога: код ошибки и details."""
        return {"error_code": self.code, **self.details}

    def to_response(self) -> ErrorResponse:
        """Тело ответа ``{success: false, error, code}``."""
        return ErrorResponse(error=self.message, code=self.code)
