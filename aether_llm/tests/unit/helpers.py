"""Вспомогательные функции для unit тестов."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import orjson


def write_settings_file(path: Path, document: Any) -> None:
    """Записать документ настроек как есть (camelCase)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(document))


def read_settings_file(path: Path) -> dict[str, Any]:
    return orjson.loads(path.read_bytes())


def chat_completion(content: Any, usage: dict[str, Any] | None = None) -> dict[str, Any]:
    """Тело ответа chat/completions с одним choice."""
    body: dict[str, Any] = {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }
    if usage is not None:
        body["usage"] = usage
    return body


class RecordingTransport:
    """httpx.MockTransport, запоминающий запросы."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def json_body(self, index: int = -1) -> dict[str, Any]:
        return orjson.loads(self.requests[index].content)
