"""Unit tests for structured logging."""
from __future__ import annotations

import asyncio
import json
import logging
import sys

import pytest
from opentelemetry import trace

from tablerelay.core.settings import LoggingSettings
from tablerelay.infra.logging import (
    ContextInjectingFilter,
    JSONFormatter,
    clear_log_context,
    configure_logging,
    get_log_context,
    log_context,
    set_log_context,
)


def make_record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="tablerelay.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    """Restore root handlers and level after configure_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLogContext:
    """Tests for contextvar log context."""

    def test_set_and_get(self):
        """set_log_context merges fields into the context."""
        set_log_context(connection="Foo")
        set_log_context(operation="Query")

        assert get_log_context() == {"connection": "Foo", "operation": "Query"}

    def test_get_returns_copy(self):
        """Mutating the returned mapping does not change the context."""
        set_log_context(connection="Foo")
        get_log_context()["connection"] = "Bar"

        assert get_log_context()["connection"] == "Foo"

    def test_clear(self):
        set_log_context(connection="Foo", operation="Query")

        clear_log_context()

        assert get_log_context() == {}

    def test_scoped_context_restored(self):
        """log_context adds fields for a block and restores the previous context."""
        set_log_context(operation="Query")

        with log_context(connection="Foo") as fields:
            assert fields == {"operation": "Query", "connection": "Foo"}
            assert get_log_context() == fields

        assert get_log_context() == {"operation": "Query"}

    def test_scoped_context_restored_on_error(self):
        with pytest.raises(RuntimeError), log_context(connection="Foo"):
            raise RuntimeError("boom")

        assert get_log_context() == {}

    async def test_tasks_are_isolated(self):
        """Each asyncio task sees its own context."""

        async def resolve(name: str) -> dict:
            set_log_context(connection=name)
            await asyncio.sleep(0)
            return get_log_context()

        results = await asyncio.gather(resolve("Foo"), resolve("Bar"))

        assert results == [{"connection": "Foo"}, {"connection": "Bar"}]
        assert get_log_context() == {}


class TestContextInjectingFilter:
    """Tests for ContextInjectingFilter."""

    def test_injects_context(self):
        """Context fields are added to records."""
        set_log_context(connection="Foo")
        record = make_record()

        assert ContextInjectingFilter().filter(record) is True
        assert record.connection == "Foo"

    def test_does_not_overwrite(self):
        """Existing record attributes win over context fields."""
        set_log_context(connection="Foo")
        record = make_record(connection="Explicit")

        ContextInjectingFilter().filter(record)

        assert record.connection == "Explicit"


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self):
        """Records become single-line JSON with level, logger, message and timestamp."""
        output = JSONFormatter().format(make_record("hello"))

        data = json.loads(output)
        assert "\n" not in output
        assert data["level"] == "INFO"
        assert data["logger"] == "tablerelay.test"
        assert data["message"] == "hello"
        assert data["timestamp"].endswith("Z")

    def test_static_and_extra_fields(self):
        """Static fields and record extras are included."""
        formatter = JSONFormatter(static={"service": "tablerelay"})

        data = json.loads(formatter.format(make_record(connection="Foo")))

        assert data["service"] == "tablerelay"
        assert data["connection"] == "Foo"
        assert "msg" not in data

    def test_exception(self):
        """Exceptions are rendered on one line."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: boom" in data["exception"]
        assert "\n" not in data["exception"]

    def test_trace_ids_when_span_active(self):
        """Trace and span ids are added while a span is current."""
        context = trace.SpanContext(trace_id=0x1234, span_id=0x5678, is_remote=False)

        with trace.use_span(trace.NonRecordingSpan(context)):
            data = json.loads(JSONFormatter().format(make_record()))

        assert data["trace_id"] == format(0x1234, "032x")
        assert data["span_id"] == format(0x5678, "016x")

    def test_no_trace_ids_without_span(self):
        """No trace ids are added outside a span."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert "trace_id" not in data

    def test_trace_ids_disabled(self):
        """include_trace_ids=False never adds trace ids."""
        context = trace.SpanContext(trace_id=0x1234, span_id=0x5678, is_remote=False)

        with trace.use_span(trace.NonRecordingSpan(context)):
            data = json.loads(JSONFormatter(include_trace_ids=False).format(make_record()))

        assert "trace_id" not in data


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_handler(self, restore_root_logger):
        """JSON logging installs a JSONFormatter with the context filter."""
        configure_logging(LoggingSettings(level="DEBUG", json=True), service="svc")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        handler = root.handlers[-1]
        assert isinstance(handler.formatter, JSONFormatter)
        assert handler.formatter.static == {"service": "svc"}
        assert any(isinstance(f, ContextInjectingFilter) for f in handler.filters)

    def test_text_handler(self, restore_root_logger):
        """Plain text logging uses a standard formatter."""
        configure_logging(LoggingSettings(level="WARNING", json=False))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[-1].formatter, JSONFormatter)

    def test_defaults_from_environment(self, restore_root_logger, monkeypatch):
        """Without settings the LOG_ environment is used."""
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        configure_logging()

        assert logging.getLogger().level == logging.ERROR
