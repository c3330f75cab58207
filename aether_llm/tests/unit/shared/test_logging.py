"""Unit тесты для shared/logging."""

import io
import logging
from collections.abc import Iterator

import orjson
import pytest
from loguru import logger

from aether_llm.core.config import LogSettings, Settings
from aether_llm.shared.errors import set_trace_id, trace_id_var
from aether_llm.shared.logging import (
    InterceptHandler,
    configure_third_party_loggers,
    get_logger,
    json_formatter,
    sanitize_sensitive_data,
    setup_logging,
)


@pytest.fixture
def json_sink() -> Iterator[io.StringIO]:
    """Loguru sink в память с JSON форматом."""
    setup_logging(Settings(_env_file=None, log=LogSettings(level="DEBUG", format="json")))
    stream = io.StringIO()
    sink_id = logger.add(stream, format=json_formatter, level="DEBUG")
    yield stream
    logger.remove(sink_id)


def records(stream: io.StringIO) -> list[dict]:
    return [orjson.loads(line) for line in stream.getvalue().splitlines() if line]


class TestSanitize:
    """Тесты маскирования credentials."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ('{"api_key": "sk-secret"}', '{"api_key": "***"}'),
            ('{"apiKey":"sk-secret"}', '{"apiKey": "***"}'),
            ("Authorization: Bearer sk-secret.token", "Authorization: Bearer ***"),
            ("url?token=abc123 next", "url?token=*** next"),
            ("nothing sensitive", "nothing sensitive"),
        ],
    )
    def test_sanitize(self, text: str, expected: str) -> None:
        assert sanitize_sensitive_data(text) == expected


class TestJsonFormatter:
    """Тесты JSON логов."""

    def test_structured_fields(self, json_sink: io.StringIO) -> None:
        get_logger().info("Task executed", task_type="translate", provider_id="openai")

        entry = records(json_sink)[-1]
        assert entry["message"] == "Task executed"
        assert entry["level"] == "INFO"
        assert entry["task_type"] == "translate"
        assert entry["provider_id"] == "openai"
        assert "serialized" not in entry

    def test_sensitive_extra_redacted(self, json_sink: io.StringIO) -> None:
        get_logger().warning("Provider saved", api_key="sk-live-1234")

        assert records(json_sink)[-1]["api_key"] == "***REDACTED***"

    def test_trace_id_attached(self, json_sink: io.StringIO) -> None:
        token = trace_id_var.set("")
        try:
            trace_id = set_trace_id("trace-abc")
            get_logger().info("With trace")
        finally:
            trace_id_var.reset(token)

        assert records(json_sink)[-1]["trace_id"] == trace_id

    def test_named_logger(self, json_sink: io.StringIO) -> None:
        get_logger("aether_llm.test").debug("Named")

        assert records(json_sink)[-1]["logger_name"] == "aether_llm.test"


class TestInterceptHandler:
    def test_third_party_loggers_intercepted(self) -> None:
        configure_third_party_loggers()

        assert isinstance(logging.getLogger("uvicorn").handlers[0], InterceptHandler)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_stdlib_record_forwarded(self, json_sink: io.StringIO) -> None:
        logging.getLogger("uvicorn.error").warning("stdlib warning")

        assert records(json_sink)[-1]["message"] == "stdlib warning"
