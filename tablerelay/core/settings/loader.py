"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from tablerelay.core.settings import get_relay_settings

    settings = get_relay_settings()  # First call: loads and validates
    settings = get_relay_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    get_relay_settings.cache_clear()

    Or pass an explicit instance where an API accepts ``settings=``:
    settings = RelaySettings(stale_cursor_policy="error")
"""

from __future__ import annotations

from functools import lru_cache

from .logs import LoggingSettings
from .relay import RelaySettings


@lru_cache(maxsize=1)
def get_relay_settings() -> RelaySettings:
    """Get cached pagination engine settings.

    Returns:
        Validated and frozen RelaySettings instance.
    """
    return RelaySettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()
