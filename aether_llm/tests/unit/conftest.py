"""Pytest configuration для unit тестов."""

from pathlib import Path
from typing import Any

import pytest

from aether_llm.providers.store import ProviderStore
from aether_llm.tests.unit.helpers import write_settings_file


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Путь к файлу настроек во временной директории."""
    return tmp_path / "data" / "llm-config.json"


@pytest.fixture
def store(config_path: Path) -> ProviderStore:
    """ProviderStore поверх временного файла."""
    return ProviderStore(config_path)


@pytest.fixture
def openai_provider() -> dict[str, Any]:
    """Включённый провайдер в формате файла настроек."""
    return {
        "id": "openai",
        "name": "OpenAI",
        "baseUrl": "https://api.openai.test/v1/",
        "apiKey": "sk-test-key-1234",
        "isEnabled": True,
        "models": ["gpt-4o", "gpt-4o-mini"],
    }


@pytest.fixture
def settings_document(openai_provider: dict[str, Any]) -> dict[str, Any]:
    """Документ с одним включённым и одним выключенным провайдером."""
    return {
        "providers": [
            openai_provider,
            {
                "id": "local",
                "name": "Local LM Studio",
                "baseUrl": "http://localhost:1234/v1",
                "apiKey": "",
                "isEnabled": False,
                "models": ["qwen2.5-7b"],
            },
        ],
        "defaultParams": {"temperature": 0.2, "topP": 1, "frequencyPenalty": 0, "presencePenalty": 0},
        "defaultProvider": "openai",
        "defaultModel": "gpt-4o-mini",
        "taskModels": {},
    }


@pytest.fixture
def seeded_store(store: ProviderStore, config_path: Path, settings_document: dict[str, Any]) -> ProviderStore:
    """Store с записанным settings_document."""
    write_settings_file(config_path, settings_document)
    return store
