"""
POSQ Promotion Engine — Promo Window Evaluation
=================================================
Decides whether a scheduled promo is in effect at a reference instant.

Three independent filters, all of which must pass:
- date range   [start_date 00:00, end_date 23:59:59.999], only when both set
- weekday      now's weekday in `days`, only when `days` is non-empty
- time of day  start_time <= HH:MM <= end_time (string compare), only
               when both set; ranges crossing midnight never match

Weekday and time are read from the instant's own wall clock. Callers
that hold an aware UTC instant convert it to store-local first
(core.time.to_store_local). is_config_active does this itself, on the
default store timezone when none is given. An empty `days` means "any day".
"""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from core.config import DEFAULT_TIMEZONE
from core.primitives.catalog import WEEKDAYS, PromoConfig
from core.time import Clock, calendar_day_window, resolve_now, to_store_local, wall_clock_hhmm


def weekday_name(dt: datetime) -> str:
    return WEEKDAYS[dt.weekday()]


def _in_date_range(now: datetime, start_date: Optional[date], end_date: Optional[date]) -> bool:
    if start_date is None or end_date is None:
        return True
    window = calendar_day_window(start_date, end_date, like=now)
    if window is None:
        return False
    return window.contains(now)


def _on_allowed_day(now: datetime, days: Optional[Iterable[str]]) -> bool:
    if not days:
        return True
    return weekday_name(now) in days


def _in_time_range(now: datetime, start_time: Optional[str], end_time: Optional[str]) -> bool:
    if not start_time or not end_time:
        return True
    current = wall_clock_hhmm(now)
    return start_time <= current <= end_time


def is_promo_active(
    days: Optional[Iterable[str]] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
    *,
    clock: Optional[Clock] = None,
) -> bool:
    """True when every configured filter admits `now`."""
    current = resolve_now(now, clock)
    days = tuple(days) if days is not None else ()
    return (
        _in_date_range(current, start_date, end_date)
        and _on_allowed_day(current, days)
        and _in_time_range(current, start_time, end_time)
    )


def is_config_active(
    promo: PromoConfig,
    now: Optional[datetime] = None,
    *,
    store_tz: Optional[tzinfo] = None,
    clock: Optional[Clock] = None,
) -> bool:
    """
    Schedule check for a PromoConfig, evaluated on the store wall clock.

    Without `store_tz`, aware instants are read in DEFAULT_TIMEZONE.
    """
    if store_tz is None:
        store_tz = ZoneInfo(DEFAULT_TIMEZONE)
    current = to_store_local(resolve_now(now, clock), store_tz)
    return is_promo_active(
        promo.days,
        promo.start_time,
        promo.end_time,
        promo.start_date,
        promo.end_date,
        current,
    )
