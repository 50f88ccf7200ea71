"""
POSQ HTTP API - Dependencies
============================
Injected providers for the reference clock and store settings.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import InMemoryConfigStore
from core.time import Clock


@dataclass(frozen=True)
class HttpApiDependencies:
    config_store: InMemoryConfigStore
    clock: Clock
