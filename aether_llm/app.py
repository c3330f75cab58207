"""Aether LLM - FastAPI Application.

Главное приложение: логирование, middleware, обработчики ошибок и роуты.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from aether_llm.api.routes import health, llm
from aether_llm.core.config import settings
from aether_llm.core.constants import API_PREFIX, APP_VERSION
from aether_llm.shared.errors import TRACE_ID_HEADER, set_trace_id, setup_exception_handlers
from aether_llm.shared.logging import get_logger, setup_logging

# Setup logging
setup_logging()
logger = get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager для startup/shutdown.

    Args:
        _app: FastAPI application (не используется, но требуется сигнатурой)

    Yields:
        None

    """
    logger.info(
        "Aether LLM запускается",
        env=settings.environment,
        debug=settings.debug,
        config_path=settings.storage.config_path,
    )

    yield

    logger.info("Aether LLM остановлен")


# =================================================================
# FastAPI Application
# =================================================================

app = FastAPI(
    title=settings.app_name,
    description="Выполнение LLM задач (сегментация, перевод, оценка) через OpenAI-compatible провайдеры",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=settings.debug,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# =================================================================
# Middleware
# =================================================================


@app.middleware("http")
async def trace_context_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Установить trace_id запроса и вернуть его в заголовке ответа."""
    trace_id = set_trace_id(request.headers.get(TRACE_ID_HEADER))
    response = await call_next(request)
    response.headers[TRACE_ID_HEADER] = trace_id
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[TRACE_ID_HEADER],
)

setup_exception_handlers(app)

# Prometheus metrics
if settings.environment != "local":
    Instrumentator().instrument(app).expose(app)
    logger.info("Prometheus metrics enabled на /metrics")

# =================================================================
# Routes
# =================================================================

app.include_router(llm.router)
app.include_router(health.router)


# =================================================================
# Root Endpoint
# =================================================================


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint.

    Returns:
        Информация о сервисе

    """
    return {
        "service": settings.app_name,
        "version": APP_VERSION,
        "status": "running",
        "api": API_PREFIX,
        "docs": "/docs" if settings.debug else "disabled",
    }
