"""
POSQ Command Layer — Rejection Model
======================================
Structured reasons for a refused checkout line or an invalid promo
configuration.

Every rejection must be:
- Deterministic (same input → same rejection)
- Machine-readable (code)
- Human-readable (message)
- Attributable (policy_name)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for a rejection.

    Fields:
        code:        Machine-readable rejection code (e.g. 'INSUFFICIENT_STOCK').
        message:     Human-readable explanation.
        policy_name: Name of the policy that caused rejection.
        params:      Values the message was built from (item id, quantities).
    """

    code: str
    message: str
    policy_name: str
    params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    @property
    def message_key(self) -> str:
        return f"rejection.{self.code.lower()}"

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
            "params": dict(self.params),
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """
    Known rejection codes.

    Convention: SCREAMING_SNAKE_CASE.
    """

    # ── Checkout ──────────────────────────────────────────────
    SNAPSHOT_STALE = "SNAPSHOT_STALE"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    INVALID_QUANTITY = "INVALID_QUANTITY"

    # ── Promo configuration ───────────────────────────────────
    PROMO_TYPE_REQUIRED = "PROMO_TYPE_REQUIRED"
    PROMO_VALUE_INVALID = "PROMO_VALUE_INVALID"
    PROMO_PERCENTAGE_TOO_HIGH = "PROMO_PERCENTAGE_TOO_HIGH"
    PROMO_DAYS_REQUIRED = "PROMO_DAYS_REQUIRED"
    PROMO_TIME_REQUIRED = "PROMO_TIME_REQUIRED"
    PROMO_TIME_ORDER = "PROMO_TIME_ORDER"
    PROMO_DATE_ORDER = "PROMO_DATE_ORDER"
