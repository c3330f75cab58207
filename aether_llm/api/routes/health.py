"""Aether LLM - Health Check Endpoint."""

from fastapi import APIRouter, status

from aether_llm.api.schemas import HealthResponse
from aether_llm.core.constants import APP_VERSION, SERVICE_NAME

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    status_code=status.HTTP_200_OK,
)
async def health_check() -> HealthResponse:
    """Проверка, что процесс отвечает.

    Returns:
        Статус, имя сервиса и версия.

    """
    return HealthResponse(service=SERVICE_NAME, version=APP_VERSION)
