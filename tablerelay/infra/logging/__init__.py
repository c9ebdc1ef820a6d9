"""Logging infrastructure.

Structured logging on top of the standard library:
- JSONL format with OpenTelemetry trace correlation
- Automatic context injection via contextvars

Basic usage:
    import logging

    from tablerelay.infra.logging import configure_logging, log_context

    configure_logging()
    logger = logging.getLogger(__name__)

    with log_context(connection="Foo"):
        logger.info("Resolving")  # Includes connection="Foo"
"""

from tablerelay.infra.logging.config import configure_logging
from tablerelay.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    log_context,
    set_log_context,
)
from tablerelay.infra.logging.formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "configure_logging",
    "get_log_context",
    "log_context",
    "set_log_context",
]
