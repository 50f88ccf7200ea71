"""
POSQ Core Config — Store Rules
================================
Doctrine: No hardcoded store settings in engine logic.
The store timezone (promo windows are local wall-clock rules) and the
checkout snapshot freshness limit come from admin-configurable data,
not from source code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


DEFAULT_TIMEZONE = "Asia/Jakarta"
DEFAULT_MAX_SNAPSHOT_AGE_SECONDS = 30
DEFAULT_CURRENCY = "IDR"


# ══════════════════════════════════════════════════════════════
# STORE RULE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StoreRule:
    """
    Per-store evaluation settings.

    timezone:                  IANA name of the store's wall clock.
    max_snapshot_age_seconds:  Oldest catalog snapshot checkout accepts.
    currency:                  ISO 4217 code used in display strings.
    """

    store_id: str = "default"
    timezone: str = DEFAULT_TIMEZONE
    max_snapshot_age_seconds: int = DEFAULT_MAX_SNAPSHOT_AGE_SECONDS
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not self.store_id or not isinstance(self.store_id, str):
            raise ValueError("store_id must be a non-empty string.")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {self.timezone!r}.") from exc
        if self.max_snapshot_age_seconds <= 0:
            raise ValueError(
                "max_snapshot_age_seconds must be positive, "
                f"got {self.max_snapshot_age_seconds}."
            )

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


# ══════════════════════════════════════════════════════════════
# CONFIG STORE PROTOCOL
# ══════════════════════════════════════════════════════════════

class ConfigStore(Protocol):
    """
    Protocol for admin-configured store settings.

    Implementations may back this with a database, file, or in-memory store.
    """

    def get_store_rule(self, store_id: str) -> Optional[StoreRule]:
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IN-MEMORY CONFIG STORE (for testing / bootstrap)
# ══════════════════════════════════════════════════════════════

class InMemoryConfigStore:
    """Simple in-memory config store with a fallback rule."""

    def __init__(self, default_rule: Optional[StoreRule] = None) -> None:
        self._default_rule = default_rule or StoreRule()
        self._rules: Dict[str, StoreRule] = {}

    def add_store_rule(self, rule: StoreRule) -> None:
        self._rules[rule.store_id] = rule

    def get_store_rule(self, store_id: str) -> Optional[StoreRule]:
        return self._rules.get(store_id)

    def rule_for(self, store_id: Optional[str]) -> StoreRule:
        """The store's rule, or the default rule when none is configured."""
        if store_id is None:
            return self._default_rule
        return self._rules.get(store_id, self._default_rule)
