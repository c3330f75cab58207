"""Тесты для системы исключений.

Покрывает:
- Автоматическую генерацию code из имени класса
- Сообщения LLM ошибок, уходящие клиенту
- HTTP статусы
- Exception handlers FastAPI
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from aether_llm.shared.errors import (
    ApiError,
    AppException,
    BadRequestError,
    EmptyResponseError,
    InvalidResponseFormatError,
    NetworkError,
    PersistenceError,
    PromptBuildError,
    ProviderDisabledError,
    ProviderNotFoundError,
    ResponseParseError,
    UnknownTaskTypeError,
    setup_exception_handlers,
)
from aether_llm.shared.errors.base import error_code_from_name


class TestAppException:
    """Тесты для базового класса AppException."""

    def test_code_generation(self):
        """code генерируется из CamelCase имени без суффикса Error."""

        class VeryComplexCustomError(AppException):
            """Очень сложная кастомная ошибка."""

        assert VeryComplexCustomError().code == "VERY_COMPLEX_CUSTOM"

    def test_default_message_from_docstring(self):
        class CustomError(AppException):
            """Произошла кастомная ошибка."""

        assert CustomError().message == "Произошла кастомная ошибка."

    @pytest.mark.parametrize(
        ("class_name", "code"),
        [
            ("ProviderNotFoundError", "PROVIDER_NOT_FOUND"),
            ("ApiError", "API"),
            ("TimeoutException", "TIMEOUT"),
            ("Error", "ERROR"),
        ],
    )
    def test_error_code_from_name(self, class_name: str, code: str):
        assert error_code_from_name(class_name) == code

    def test_log_context_drops_empty_details(self):
        error = ProviderDisabledError("Local LM Studio")

        assert error.log_context() == {"error_code": "PROVIDER_DISABLED", "provider_name": "Local LM Studio"}

    def test_explicit_code_kept(self):
        assert BadRequestError("x").code == "BAD_REQUEST"

    def test_to_response(self):
        response = ProviderNotFoundError("p1").to_response()

        assert response.model_dump() == {
            "success": False,
            "error": "Provider not found: p1",
            "code": "PROVIDER_NOT_FOUND",
        }


class TestLLMErrors:
    """Сообщения и статусы LLM ошибок."""

    @pytest.mark.parametrize(
        ("error", "message", "status_code"),
        [
            (ProviderNotFoundError("p1"), "Provider not found: p1", 404),
            (ProviderDisabledError("Local"), "Provider is disabled: Local", 409),
            (UnknownTaskTypeError("foo"), "Unknown task type: foo", 400),
            (PromptBuildError("bad params"), "Failed to build prompts: bad params", 400),
            (ApiError(429, "rate limited"), "API error (429): rate limited", 502),
            (EmptyResponseError(), "No content in LLM response", 502),
            (NetworkError("Connection refused"), "Network error: Connection refused", 503),
            (InvalidResponseFormatError(), "Invalid response format from models endpoint", 502),
        ],
    )
    def test_message_and_status(self, error: AppException, message: str, status_code: int):
        assert error.message == message
        assert error.status_code == status_code

    def test_api_error_fields(self):
        error = ApiError(500, "boom")

        assert (error.status, error.body) == (500, "boom")

    def test_response_parse_error_snippet(self):
        content = "y" * 500

        error = ResponseParseError(content)

        assert error.snippet == "y" * 200
        assert error.message == f"Failed to parse LLM response as JSON: {'y' * 200}"

    def test_persistence_error_details(self):
        error = PersistenceError("/data/llm-config.json", "Permission denied")

        assert error.status_code == 500
        assert error.details == {"file_path": "/data/llm-config.json", "reason": "Permission denied"}


class TestExceptionHandlers:
    """Тесты обработчиков FastAPI."""

    @pytest.fixture
    def client(self) -> TestClient:
        app = FastAPI()
        setup_exception_handlers(app)

        @app.get("/not-found")
        async def not_found() -> None:
            raise ProviderNotFoundError("p1")

        @app.get("/crash")
        async def crash() -> None:
            msg = "unexpected"
            raise RuntimeError(msg)

        @app.get("/typed")
        async def typed(count: int) -> dict[str, int]:
            return {"count": count}

        return TestClient(app, raise_server_exceptions=False)

    def test_app_exception(self, client: TestClient):
        response = client.get("/not-found")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Provider not found: p1", "code": "PROVIDER_NOT_FOUND"}
        assert response.headers["X-Error-Code"] == "PROVIDER_NOT_FOUND"
        assert response.headers["X-Trace-Id"]

    def test_unexpected_exception(self, client: TestClient):
        response = client.get("/crash")

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["error"] == "unexpected"

    def test_validation_error_is_400(self, client: TestClient):
        response = client.get("/typed", params={"count": "many"})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "count" in response.json()["error"]
