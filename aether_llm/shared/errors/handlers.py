"""Exception handlers for FastAPI.

Все ответы с ошибкой имеют форму `{success: false, error}`.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from aether_llm.shared.errors.base import AppException
from aether_llm.shared.errors.context import TRACE_ID_HEADER, get_trace_id
from aether_llm.shared.errors.schemas import ErrorResponse

INVALID_JSON_BODY = "Invalid JSON body"


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Обработчик доменных исключений.

    Args:
        request: HTTP запрос.
        exc: Исключение AppException.

    Returns:
        JSON ответ с ошибкой.

    """
    logger.warning(
        f"Business error: {exc.code}",
        error=exc.message,
        path=request.url.path,
        **exc.log_context(),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(exclude_none=True),
        headers={"X-Error-Code": exc.code, TRACE_ID_HEADER: get_trace_id()},
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Обработчик ошибок валидации тела запроса.

    Невалидный JSON считается непредвиденной ошибкой (500),
    остальные ошибки валидации - ошибкой клиента (400).

    Args:
        request: HTTP запрос.
        exc: Исключение валидации.

    Returns:
        JSON ответ с ошибкой валидации.

    """
    errors = exc.errors()
    logger.warning("Validation error", errors=errors, path=request.url.path)

    if any(error.get("type") == "json_invalid" for error in errors):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        message = INVALID_JSON_BODY
    else:
        status_code = status.HTTP_400_BAD_REQUEST
        message = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in errors
        ) or "Invalid request"

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, code="VALIDATION_ERROR").model_dump(exclude_none=True),
        headers={TRACE_ID_HEADER: get_trace_id()},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Последний обработчик для непредвиденных ошибок.

    Args:
        request: HTTP запрос.
        exc: Любое исключение.

    Returns:
        JSON ответ с общей ошибкой.

    """
    logger.exception(
        "Unhandled exception",
        exception_type=type(exc).__name__,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=str(exc) or "Unknown error", code="INTERNAL_ERROR").model_dump(
            exclude_none=True
        ),
        headers={TRACE_ID_HEADER: get_trace_id()},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Зарегистрировать обработчики исключений в FastAPI.

    Args:
        app: Экземпляр FastAPI приложения.

    """
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)

    logger.debug("Exception handlers registered")
