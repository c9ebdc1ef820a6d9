"""Logging configuration setup.

tablerelay is a library, so nothing here runs on import. Applications
that want the JSONL output call ``configure_logging()`` once at startup;
otherwise records simply propagate to whatever the host configured.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tablerelay.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)


def configure_logging(
    log_settings: LoggingSettings | None = None,
    *,
    service: str = "tablerelay",
) -> None:
    """Configure root logging with dictConfig.

    Installs a single stdout handler on the root logger, using
    JSONFormatter when ``log_settings.json`` is true and a plain text
    format otherwise, plus the ContextInjectingFilter.

    Args:
        log_settings: Logging settings. Loaded via get_logging_settings()
            when omitted.
        service: Static ``service`` field added to JSON records.

    Example:
        from tablerelay.infra.logging import configure_logging

        configure_logging()
        logging.getLogger(__name__).info("ready")
    """
    if log_settings is None:
        from tablerelay.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    formatters: dict[str, Any]
    if log_settings.json:
        formatters = {
            "default": {
                "()": "tablerelay.infra.logging.formatters.JSONFormatter",
                "static": {"service": service},
                "include_trace_ids": log_settings.include_trace_ids,
            }
        }
    else:
        formatters = {
            "default": {
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            }
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": formatters,
            "filters": {
                "context": {
                    "()": "tablerelay.infra.logging.context.ContextInjectingFilter",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "default",
                    "filters": ["context"],
                },
            },
            "root": {
                "level": log_settings.level,
                "handlers": ["console"],
            },
        }
    )
    logger.debug("Logging configured (json=%s, level=%s)", log_settings.json, log_settings.level)
