"""
POSQ Command Layer — Rejections
=================================
Checkout and promo-configuration refusals are first-class,
structured values, never bare strings.
"""

from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
)

__all__ = [
    "ReasonCode",
    "RejectionReason",
]
