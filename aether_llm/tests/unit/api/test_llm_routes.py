"""Unit тесты для /api/llm/* endpoints.

Хранилище - временный файл, провайдер - httpx.MockTransport.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from aether_llm.app import app
from aether_llm.core.dependencies import get_model_discovery, get_provider_store, get_task_executor
from aether_llm.providers.discovery import ModelDiscovery
from aether_llm.providers.store import ProviderStore
from aether_llm.services.task_executor import TaskExecutor
from aether_llm.tests.unit.helpers import RecordingTransport, chat_completion, read_settings_file


def provider_api(request: httpx.Request) -> httpx.Response:
    """Эмуляция OpenAI-compatible API."""
    if request.url.path.endswith("/models"):
        return httpx.Response(200, json={"data": [{"id": "gpt-4o"}, {"id": "tts-1"}, {"id": "gpt-4o-mini"}]})
    return httpx.Response(
        200,
        json=chat_completion('{"translation": "你好"}', usage={"prompt_tokens": 3, "completion_tokens": 2}),
    )


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport(provider_api)


@pytest.fixture
def client(seeded_store: ProviderStore, transport: RecordingTransport) -> Iterator[TestClient]:
    """TestClient с подменёнными зависимостями."""
    app.dependency_overrides[get_provider_store] = lambda: seeded_store
    app.dependency_overrides[get_task_executor] = lambda: TaskExecutor(
        seeded_store, timeout=5.0, transport=transport.transport
    )
    app.dependency_overrides[get_model_discovery] = lambda: ModelDiscovery(timeout=5.0, transport=transport.transport)

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()


class TestExecuteEndpoint:
    """Тесты POST /api/llm/execute."""

    def test_success(self, client: TestClient) -> None:
        response = client.post(
            "/api/llm/execute",
            json={"taskType": "translate", "providerId": "openai", "modelId": "gpt-4o", "params": {"text": "Hi"}},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {"translation": "你好"},
            "usage": {"promptTokens": 3, "completionTokens": 2, "totalTokens": 0},
        }
        assert response.headers["X-Trace-Id"]

    def test_missing_fields(self, client: TestClient, transport: RecordingTransport) -> None:
        response = client.post("/api/llm/execute", json={"taskType": "translate", "providerId": "openai"})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"] == "Missing required fields: taskType, providerId, modelId"
        assert transport.requests == []

    def test_task_failure_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/llm/execute",
            json={"taskType": "translate", "providerId": "local", "modelId": "qwen2.5-7b"},
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Provider is disabled: Local LM Studio"}

    def test_model_params_forwarded(self, client: TestClient, transport: RecordingTransport) -> None:
        client.post(
            "/api/llm/execute",
            json={
                "taskType": "translate",
                "providerId": "openai",
                "modelId": "gpt-4o",
                "params": {"text": "Hi"},
                "modelParams": {"maxTokens": 64, "temperature": 1.1},
            },
        )

        body = transport.json_body()
        assert body["max_tokens"] == 64
        assert body["temperature"] == 1.1

    def test_invalid_json_body(self, client: TestClient) -> None:
        response = client.post(
            "/api/llm/execute",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Invalid JSON body"

    def test_trace_id_echoed(self, client: TestClient) -> None:
        response = client.post("/api/llm/execute", json={}, headers={"X-Trace-Id": "trace-123"})

        assert response.headers["X-Trace-Id"] == "trace-123"


class TestModelsEndpoint:
    """Тесты POST /api/llm/models."""

    def test_success(self, client: TestClient) -> None:
        response = client.post("/api/llm/models", json={"baseUrl": "https://api.test/v1", "apiKey": "k"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "models": ["gpt-4o", "gpt-4o-mini"]}

    @pytest.mark.parametrize("body", [{}, {"baseUrl": "https://api.test/v1"}, {"apiKey": "k"}])
    def test_missing_fields(self, client: TestClient, body: dict[str, Any]) -> None:
        response = client.post("/api/llm/models", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing baseUrl or apiKey"

    def test_discovery_failure(self, seeded_store: ProviderStore) -> None:
        failing = RecordingTransport(lambda request: httpx.Response(401, text="unauthorized"))
        app.dependency_overrides[get_model_discovery] = lambda: ModelDiscovery(transport=failing.transport)
        try:
            response = TestClient(app).post("/api/llm/models", json={"baseUrl": "https://api.test", "apiKey": "k"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "API error (401): unauthorized"}

    def test_non_ascii_api_key(self, client: TestClient) -> None:
        response = client.post("/api/llm/models", json={"baseUrl": "http://x.test/v1", "apiKey": "sk-ключ"})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"].startswith("Network error: ")

    def test_refresh_provider_models(self, client: TestClient, seeded_store: ProviderStore) -> None:
        response = client.post("/api/llm/provider/models", params={"id": "openai"})

        assert response.status_code == 200
        assert response.json()["models"] == ["gpt-4o", "gpt-4o-mini"]


class TestConfigEndpoints:
    """Тесты GET/POST /api/llm/config."""

    def test_get_masks_keys(self, client: TestClient) -> None:
        response = client.get("/api/llm/config")

        assert response.status_code == 200
        config = response.json()["config"]
        assert config["providers"][0]["apiKey"] == "***1234"
        assert config["providers"][1]["apiKey"] == ""
        assert config["defaultParams"]["temperature"] == 0.2

    def test_post_masked_config_keeps_keys(self, client: TestClient, config_path: Path) -> None:
        config = client.get("/api/llm/config").json()["config"]
        config["defaultModel"] = "gpt-4o"

        response = client.post("/api/llm/config", json={"config": config})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        document = read_settings_file(config_path)
        assert document["defaultModel"] == "gpt-4o"
        assert document["providers"][0]["apiKey"] == "sk-test-key-1234"

    def test_post_missing_config(self, client: TestClient) -> None:
        response = client.post("/api/llm/config", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing config field"

    def test_post_save_failure(self, client: TestClient, seeded_store: ProviderStore) -> None:
        async def fail(settings: Any) -> bool:
            return False

        seeded_store.save_settings = fail  # type: ignore[method-assign]

        response = client.post("/api/llm/config", json={"config": {"providers": []}})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Failed to save configuration", "code": "INTERNAL_ERROR"}


class TestProviderEndpoints:
    """Тесты POST/DELETE /api/llm/provider."""

    def test_create_provider(self, client: TestClient, seeded_store: ProviderStore) -> None:
        response = client.post(
            "/api/llm/provider",
            json={"provider": {"id": "deepseek", "name": "DeepSeek", "baseUrl": "https://api.deepseek.test"}},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert client.get("/api/llm/config").json()["config"]["providers"][2]["id"] == "deepseek"

    def test_update_with_masked_key_keeps_stored(self, client: TestClient, config_path: Path) -> None:
        client.post(
            "/api/llm/provider",
            json={
                "provider": {
                    "id": "openai",
                    "name": "OpenAI (renamed)",
                    "baseUrl": "https://api.openai.test/v1",
                    "apiKey": "***1234",
                }
            },
        )

        provider = read_settings_file(config_path)["providers"][0]
        assert provider["name"] == "OpenAI (renamed)"
        assert provider["apiKey"] == "sk-test-key-1234"

    @pytest.mark.parametrize("body", [{}, {"provider": {}}, {"provider": {"id": "", "name": "x"}}])
    def test_missing_provider_id(self, client: TestClient, body: dict[str, Any]) -> None:
        response = client.post("/api/llm/provider", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing provider or provider.id"

    def test_delete_provider(self, client: TestClient, config_path: Path) -> None:
        response = client.delete("/api/llm/provider", params={"id": "openai"})

        assert response.status_code == 200
        document = read_settings_file(config_path)
        assert [p["id"] for p in document["providers"]] == ["local"]
        assert "defaultProvider" not in document

    def test_delete_missing_id(self, client: TestClient) -> None:
        response = client.delete("/api/llm/provider")

        assert response.status_code == 400
        assert response.json()["error"] == "Missing provider id parameter"

    def test_delete_unknown(self, client: TestClient) -> None:
        response = client.delete("/api/llm/provider", params={"id": "missing"})

        assert response.status_code == 404
        assert response.json()["error"] == "Provider not found"


class TestConvenienceEndpoints:
    """Тесты /segment, /align, /greetings."""

    def test_segment_uses_default_model(self, client: TestClient, transport: RecordingTransport) -> None:
        transport._handler = lambda request: httpx.Response(
            200, json=chat_completion('{"segments": ["Dr. Who arrived.", "Hi."]}')
        )

        response = client.post("/api/llm/segment", json={"text": "Dr. Who arrived. Hi.", "language": "en"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "segments": ["Dr. Who arrived.", "Hi."],
            "usedFallback": False,
        }
        assert transport.json_body()["model"] == "gpt-4o-mini"

    def test_segment_missing_text(self, client: TestClient) -> None:
        response = client.post("/api/llm/segment", json={"language": "en"})

        assert response.status_code == 400

    def test_align_fallback_on_failure(self, client: TestClient, transport: RecordingTransport) -> None:
        transport._handler = lambda request: httpx.Response(503, text="overloaded")

        response = client.post("/api/llm/align", json={"enText": "A. B.", "zhText": "甲。"})

        data = response.json()
        assert data["usedFallback"] is True
        assert data["pairs"] == [{"en": "A.", "zh": "甲。"}, {"en": "B.", "zh": ""}]
        assert data["error"] == "API error (503): overloaded"

    def test_segment_both(self, client: TestClient, transport: RecordingTransport) -> None:
        transport._handler = lambda request: httpx.Response(503, text="overloaded")

        response = client.post("/api/llm/segment-both", json={"enText": "A. B.", "zhText": "甲。乙。"})

        assert response.status_code == 200
        data = response.json()
        assert data["en"]["segments"] == ["A.", "B."]
        assert data["zh"]["segments"] == ["甲。", "乙。"]
        assert data["en"]["usedFallback"] is True
        assert data["zh"]["error"] == "API error (503): overloaded"
        assert len(transport.requests) == 2

    def test_greetings(self, client: TestClient, transport: RecordingTransport) -> None:
        transport._handler = lambda request: httpx.Response(
            200, json=chat_completion('{"greetings": ["Hello, Lin!", "晚上好，林！"]}')
        )

        response = client.post("/api/llm/greetings", json={"userName": "Lin", "count": 2})

        assert response.json()["greetings"] == ["Hello, Lin!", "晚上好，林！"]
        assert "Name: Lin" in transport.json_body()["messages"][1]["content"]


class TestServiceEndpoints:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "aether_llm", "version": "1.0.0"}

    def test_root(self, client: TestClient) -> None:
        data = client.get("/").json()

        assert data["status"] == "running"
        assert data["api"] == "/api/llm"
