"""JSON Lines formatter with OpenTelemetry trace correlation."""
from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from opentelemetry import trace

# Attributes every LogRecord carries; anything else on a record came from
# ``extra=`` or from ContextInjectingFilter and is copied into the payload.
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__,
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """Format each record as one JSON object on one line.

    The payload holds ``level``, ``logger``, ``message`` and a UTC
    ``timestamp``, the static fields given at construction, every extra
    field of the record, and ``trace_id``/``span_id`` while an
    OpenTelemetry span is current.

    Example output:
        {"level": "WARNING", "logger": "tablerelay.core.pagination.offsets",
         "message": "Stale after cursor, falling back to window boundary",
         "timestamp": "2025-01-01T00:00:00.123Z", "connection": "Foo",
         "argument": "after"}
    """

    def __init__(
        self,
        static: dict[str, Any] | None = None,
        include_trace_ids: bool = True,
    ) -> None:
        super().__init__()
        self.static = dict(static or {})
        self.include_trace_ids = include_trace_ids

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "timestamp": self._timestamp(record),
        }
        if self.include_trace_ids:
            payload.update(self._trace_fields())
        if record.exc_info:
            payload["exception"] = self._one_line(self.formatException(record.exc_info))
        if record.stack_info:
            payload["stack_trace"] = self._one_line(record.stack_info)
        payload.update(self.static)
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and key not in payload
        )
        return json.dumps(payload, ensure_ascii=False, default=str)

    @staticmethod
    def _timestamp(record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @staticmethod
    def _trace_fields() -> dict[str, str]:
        span_context = trace.get_current_span().get_span_context()
        if not span_context.is_valid:
            return {}
        return {
            "trace_id": format(span_context.trace_id, "032x"),
            "span_id": format(span_context.span_id, "016x"),
        }

    @staticmethod
    def _one_line(text: str) -> str:
        return text.replace("\n", "\\n")


__all__ = ["JSONFormatter"]
