"""
POSQ Core Config — Public API
===============================
Admin-configurable store rules (timezone, snapshot freshness).
Doctrine: No hardcoded store settings in engine logic.
"""

from core.config.rules import (
    ConfigStore,
    DEFAULT_MAX_SNAPSHOT_AGE_SECONDS,
    DEFAULT_TIMEZONE,
    InMemoryConfigStore,
    StoreRule,
)

__all__ = [
    "StoreRule",
    "ConfigStore",
    "InMemoryConfigStore",
    "DEFAULT_TIMEZONE",
    "DEFAULT_MAX_SNAPSHOT_AGE_SECONDS",
]
