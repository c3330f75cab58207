"""Error schemas.

Pydantic схемы для ответов с ошибкой.
"""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Стандартный ответ с ошибкой для /api/llm/*."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": "Provider not found: openai-main",
                "code": "PROVIDER_NOT_FOUND",
            }
        }
    )

    success: bool = Field(default=False, description="Всегда false для ошибок")
    error: str = Field(..., description="Человекочитаемое сообщение")
    code: str | None = Field(default=None, description="Код ошибки")
