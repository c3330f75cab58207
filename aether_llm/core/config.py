"""Aether LLM - Configuration.

Конфигурация приложения через Pydantic Settings.
Строгая типизация, валидация форматов и централизованное управление.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    """Настройки сервера (Uvicorn)."""

    host: str = Field(default="0.0.0.0", description="Хост")
    port: int = Field(default=3001, description="Порт")
    reload: bool = Field(default=False, description="Режим автоперезагрузки")

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        """Валидация порта.

        Args:
            value: Номер порта для проверки.

        Returns:
            Проверенное значение порта.

        Raises:
            ValueError: Если порт вне допустимого диапазона.

        """
        if not 1 <= value <= 65535:
            msg = f"Порт ({value}) должен быть в диапазоне 1-65535"
            raise ValueError(msg)
        return value


class StorageSettings(BaseModel):
    """Настройки хранения конфигурации провайдеров."""

    config_path: str = Field(
        default="data/llm-config.json",
        description="Путь к JSON файлу с настройками LLM (относительно cwd)",
    )

    @field_validator("config_path")
    @classmethod
    def validate_config_path(cls, value: str) -> str:
        """Путь к файлу настроек не пустой и указывает на .json файл."""
        value = value.strip()
        if not value.endswith(".json"):
            msg = f"config_path ({value!r}) должен указывать на .json файл"
            raise ValueError(msg)
        return value


class HTTPSettings(BaseModel):
    """Настройки HTTP клиента для OpenAI-compatible API."""

    timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Таймаут запроса к провайдеру в секундах",
    )


class LogSettings(BaseModel):
    """Настройки логирования."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Уровень логирования",
    )
    format: Literal["json", "text"] = Field(
        default="text",
        description="Формат логов",
    )
    file_path: str | None = Field(
        default=None,
        description="Путь к файлу логов (None - только stdout)",
    )
    rotation: str = Field(
        default="10 MB",
        description="Ротация логов",
    )
    retention: str = Field(
        default="10 days",
        description="Время хранения логов",
    )


class Settings(BaseSettings):
    """Главные настройки приложения.

    Все настройки загружаются из переменных окружения с префиксом AETHER__.
    Пример: AETHER__SERVER__PORT=8080
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        env_prefix="AETHER__",
        extra="ignore",
    )

    app_name: str = Field(default="Aether LLM Service", description="Название приложения")
    environment: Literal["local", "dev", "prod"] = Field(
        default="local",
        description="Окружение",
    )
    debug: bool = Field(default=False, description="Режим отладки")
    cors_allowed_origins: list[str] = Field(default=["*"], description="Разрешённые origins для CORS")

    server: ServerSettings = Field(default_factory=ServerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    http: HTTPSettings = Field(default_factory=HTTPSettings)
    log: LogSettings = Field(default_factory=LogSettings)


# Глобальный объект настроек (singleton)
settings = Settings()
