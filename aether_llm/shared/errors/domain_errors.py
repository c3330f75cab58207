"""Domain errors.

Общие доменные исключения приложения.
"""

from aether_llm.shared.errors.base import AppException


class BadRequestError(AppException):
    """Invalid request."""

    status_code = 400
    code = "BAD_REQUEST"


class NotFoundError(AppException):
    """Resource not found."""

    status_code = 404
    code = "NOT_FOUND"


class PersistenceError(AppException):
    """Failed to read or write LLM settings."""

    status_code = 500

    def __init__(self, path: str, reason: str) -> None:
        """Инициализация исключения.

        Args:
            path: Путь к файлу настроек.
            reason: Причина ошибки ввода-вывода.

        """
        super().__init__(
            message=f"Settings persistence failed for {path}: {reason}",
            details={"file_path": path, "reason": reason},
        )
