"""
POSQ Django Adapter Wiring
==========================
Constructs HttpApiDependencies from Django settings.

This module is adapter-only glue:
- no engine logic
- no persistence; the catalog snapshot arrives with each request
"""

from __future__ import annotations

import threading

from django.conf import settings

from core.config import InMemoryConfigStore, StoreRule
from core.http_api.dependencies import HttpApiDependencies
from core.time import SystemClock


_DEPENDENCIES_LOCK = threading.Lock()
_DEPENDENCIES: HttpApiDependencies | None = None


def _build_default_rule() -> StoreRule:
    return StoreRule(
        store_id="default",
        timezone=getattr(settings, "POSQ_STORE_TIMEZONE", "Asia/Jakarta"),
        max_snapshot_age_seconds=int(
            getattr(settings, "POSQ_MAX_SNAPSHOT_AGE_SECONDS", 30)
        ),
        currency=getattr(settings, "POSQ_CURRENCY", "IDR"),
    )


def _build_config_store() -> InMemoryConfigStore:
    store = InMemoryConfigStore(default_rule=_build_default_rule())
    for store_id, overrides in getattr(settings, "POSQ_STORE_RULES", {}).items():
        store.add_store_rule(StoreRule(store_id=store_id, **overrides))
    return store


def build_dependencies() -> HttpApiDependencies:
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        if _DEPENDENCIES is None:
            _DEPENDENCIES = HttpApiDependencies(
                config_store=_build_config_store(),
                clock=SystemClock(),
            )
        return _DEPENDENCIES


def reset_dependencies() -> None:
    """Drop cached wiring so the next request re-reads settings (tests only)."""
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        _DEPENDENCIES = None
