"""
POSQ Core Time — Explicit Clock Protocol
==========================================
Doctrine: NO datetime.now() inside engine logic.
Engines receive the reference instant explicitly. When a caller
omits it, the instant comes from an injected Clock, falling back to
the module default clock.

Promo windows are defined on the store's local wall clock, so the
clock also knows how to present an instant in a store timezone.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional, Protocol


# ══════════════════════════════════════════════════════════════
# CLOCK PROTOCOL
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class SystemClock:
    """Production clock — real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Test clock — returns a fixed timestamp.

    Usage:
        clock = FixedClock(datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc))
        assert clock.now_utc().hour == 10
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt.astimezone(timezone.utc)

    def advance(self, seconds: float) -> None:
        """Advance the fixed time (multi-step scenarios such as snapshot ageing)."""
        self._fixed_dt = self._fixed_dt + timedelta(seconds=seconds)


# ══════════════════════════════════════════════════════════════
# DEFAULT CLOCK
# ══════════════════════════════════════════════════════════════

_default_clock: Clock = SystemClock()


def set_default_clock(clock: Clock) -> None:
    """Override the default clock (testing only)."""
    global _default_clock
    _default_clock = clock


def resolve_now(
    now: Optional[datetime] = None,
    clock: Optional[Clock] = None,
) -> datetime:
    """
    Return the reference instant for an evaluation.

    An explicit `now` always wins; otherwise the given clock, then
    the default clock, is asked.
    """
    if now is not None:
        return now
    return (clock or _default_clock).now_utc()


def to_store_local(now: datetime, store_tz: Optional[tzinfo]) -> datetime:
    """
    Present `now` on the store's wall clock.

    Aware instants are converted into `store_tz`. Naive instants are
    taken to already be store-local and are returned unchanged.
    """
    if now.tzinfo is None or store_tz is None:
        return now
    return now.astimezone(store_tz)
