"""API Schemas."""

from aether_llm.api.schemas.requests import (
    AlignRequest,
    ExecuteTaskRequest,
    FetchModelsRequest,
    GreetingsRequest,
    SaveConfigRequest,
    SaveProviderRequest,
    SegmentRequest,
)
from aether_llm.api.schemas.responses import (
    ConfigResponse,
    HealthResponse,
    ModelsResponse,
    SuccessResponse,
)

__all__ = [
    "AlignRequest",
    "ConfigResponse",
    "ExecuteTaskRequest",
    "FetchModelsRequest",
    "GreetingsRequest",
    "HealthResponse",
    "ModelsResponse",
    "SaveConfigRequest",
    "SaveProviderRequest",
    "SegmentRequest",
    "SuccessResponse",
]
