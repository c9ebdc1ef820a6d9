"""Pydantic Settings v2 configuration.

Settings are read from environment variables (and an optional ``.env``
file), validated once and cached:

    from tablerelay.core.settings import get_relay_settings

    settings = get_relay_settings()
    print(settings.stale_cursor_policy)
"""

from __future__ import annotations

from .loader import get_logging_settings, get_relay_settings
from .logs import LoggingSettings
from .relay import RelaySettings, StaleCursorPolicy

__all__ = [
    "LoggingSettings",
    "RelaySettings",
    "StaleCursorPolicy",
    "get_logging_settings",
    "get_relay_settings",
]
