"""
POSQ Core Time — Temporal Helpers
===================================
Pure functions for time interval logic.
All functions take explicit datetime arguments — no hidden clock access.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional


# ══════════════════════════════════════════════════════════════
# TIME WINDOW — Closed interval [start, end]
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TimeWindow:
    """
    A closed time interval [start, end].

    Invariant: start <= end (enforced at construction).
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(
                f"TimeWindow start ({self.start}) must be <= end ({self.end})."
            )

    def contains(self, dt: datetime) -> bool:
        """Check if datetime falls within window (inclusive)."""
        return self.start <= dt <= self.end


def calendar_day_window(
    start_date: date,
    end_date: date,
    like: Optional[datetime] = None,
) -> Optional[TimeWindow]:
    """
    Window from `start_date` 00:00 to `end_date` 23:59:59.999.

    The bounds take the tzinfo of `like` so they compare cleanly against
    it. Returns None when end_date precedes start_date (an empty range).
    """
    if end_date < start_date:
        return None
    tz = like.tzinfo if like is not None else None
    start = datetime.combine(start_date, time.min, tzinfo=tz)
    end = datetime.combine(end_date, time(23, 59, 59, 999000), tzinfo=tz)
    return TimeWindow(start=start, end=end)


# ══════════════════════════════════════════════════════════════
# PURE TEMPORAL FUNCTIONS
# ══════════════════════════════════════════════════════════════

def is_expired(issued_at: datetime, ttl_seconds: int, now: datetime) -> bool:
    """
    Check if something issued at `issued_at` has expired given a TTL.

    All arguments are explicit — no hidden clock.
    """
    return (now - issued_at).total_seconds() > ttl_seconds


def age_seconds(issued_at: datetime, now: datetime) -> float:
    """Seconds elapsed between `issued_at` and `now` (negative if in the future)."""
    return (now - issued_at).total_seconds()


def wall_clock_hhmm(dt: datetime) -> str:
    """Zero-padded HH:MM of the datetime's own wall clock."""
    return f"{dt.hour:02d}:{dt.minute:02d}"
