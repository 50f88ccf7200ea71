"""
POSQ Core Time — Public API
=============================
Explicit clock protocol and temporal helpers.
Doctrine: NO datetime.now() in engine logic.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    resolve_now,
    set_default_clock,
    to_store_local,
)
from core.time.temporal import (
    TimeWindow,
    age_seconds,
    calendar_day_window,
    is_expired,
    wall_clock_hhmm,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "set_default_clock",
    "resolve_now",
    "to_store_local",
    "TimeWindow",
    "age_seconds",
    "calendar_day_window",
    "is_expired",
    "wall_clock_hhmm",
]
