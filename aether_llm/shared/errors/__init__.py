"""Shared errors module.

Система обработки ошибок приложения.
"""

from aether_llm.shared.errors.base import AppException
from aether_llm.shared.errors.context import TRACE_ID_HEADER, get_trace_id, set_trace_id, trace_id_var
from aether_llm.shared.errors.domain_errors import BadRequestError, NotFoundError, PersistenceError
from aether_llm.shared.errors.handlers import setup_exception_handlers
from aether_llm.shared.errors.llm_errors import (
    ApiError,
    EmptyResponseError,
    InvalidResponseFormatError,
    NetworkError,
    PromptBuildError,
    ProviderDisabledError,
    ProviderNotFoundError,
    TRANSPORT_ERRORS,
    ResponseParseError,
    UnknownTaskTypeError,
)
from aether_llm.shared.errors.schemas import ErrorResponse

__all__ = [
    # Base
    "AppException",
    # Context
    "TRACE_ID_HEADER",
    "trace_id_var",
    "get_trace_id",
    "set_trace_id",
    # Domain errors
    "BadRequestError",
    "NotFoundError",
    "PersistenceError",
    # LLM errors
    "ApiError",
    "EmptyResponseError",
    "InvalidResponseFormatError",
    "NetworkError",
    "PromptBuildError",
    "ProviderDisabledError",
    "ProviderNotFoundError",
    "ResponseParseError",
    "TRANSPORT_ERRORS",
    "UnknownTaskTypeError",
    # Handlers
    "setup_exception_handlers",
    # Schemas
    "ErrorResponse",
]
