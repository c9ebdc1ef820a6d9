"""Per-resolution log context.

Fields set here (the connection's type name, the node being resolved)
are attached by ContextInjectingFilter to every record logged while they
are active. The context lives in a ContextVar, so concurrently resolving
fields never see each other's values.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_log_context: ContextVar[dict[str, Any]] = ContextVar("tablerelay_log_context", default={})


def set_log_context(**fields: Any) -> None:
    """Merge ``fields`` into the current context."""
    _log_context.set({**_log_context.get(), **fields})


def get_log_context() -> dict[str, Any]:
    """Copy of the current context."""
    return dict(_log_context.get())


def clear_log_context() -> None:
    _log_context.set({})


@contextmanager
def log_context(**fields: Any) -> Iterator[dict[str, Any]]:
    """Add ``fields`` to the context for the duration of a block.

    The previous context is restored on exit, including when the block
    raises.

    Example:
        with log_context(connection="Foo"):
            logger.debug("Resolving")  # record.connection == "Foo"
    """
    token = _log_context.set({**_log_context.get(), **fields})
    try:
        yield _log_context.get()
    finally:
        _log_context.reset(token)


class ContextInjectingFilter(logging.Filter):
    """Copy the current log context onto each record.

    Attributes already present on the record (including ``extra=``
    fields) take precedence over context fields.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


__all__ = [
    "ContextInjectingFilter",
    "clear_log_context",
    "get_log_context",
    "log_context",
    "set_log_context",
]
